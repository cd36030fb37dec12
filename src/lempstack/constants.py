"""Fixed names, images and defaults of the generated stack."""

DEFAULT_PROJECT_DIR = "lemp-docker"
PROJECT_SUBDIRS = ("nginx", "php", "mysql", "laravel")

CREDENTIALS_FILE = ".env"
COMPOSE_FILE = "docker-compose.yml"
DOCKERFILE = "php/Dockerfile"
NGINX_CONF = "nginx/default.conf"
APP_DIR = "laravel"
WELCOME_TEMPLATE = "resources/views/welcome.blade.php"
REPORT_FILE = "lempstack-run.json"

DEFAULT_CREDENTIALS = (
    ("DB_ROOT_PASSWORD", "admin"),
    ("DB_DATABASE", "laravel_db"),
    ("DB_USERNAME", "popo"),
    ("DB_PASSWORD", "baba4678"),
)

SERVICE_NGINX = "nginx"
SERVICE_PHP = "php"
SERVICE_DB = "mariadb"
SERVICES = (SERVICE_PHP, SERVICE_NGINX, SERVICE_DB)

NGINX_CONTAINER = "lemp-nginx"
PHP_CONTAINER = "lemp-php"
DB_CONTAINER = "lemp-mariadb"
NETWORK_NAME = "lemp-network"

NGINX_IMAGE = "nginx:stable-alpine"
DB_IMAGE = "mariadb:10.6"
PHP_BASE_IMAGE = "php:8.2-fpm-alpine"

HTTP_PORT = 8220
DB_PORT = 3306
FPM_PORT = 9000

CONTAINER_APP_ROOT = "/var/www/html"
WRITABLE_DIRS = ("storage", "bootstrap/cache")
WRITABLE_MODE = "777"

MIN_COMPOSE_VERSION = "2.0"
