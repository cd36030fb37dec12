"""Configuration file templates for the generated stack."""

import os
from typing import Any, Dict, List

import yaml

from lempstack.constants import (
    CONTAINER_APP_ROOT,
    DB_CONTAINER,
    DB_IMAGE,
    DB_PORT,
    FPM_PORT,
    HTTP_PORT,
    NETWORK_NAME,
    NGINX_CONTAINER,
    NGINX_IMAGE,
    PHP_BASE_IMAGE,
    PHP_CONTAINER,
    SERVICE_DB,
    SERVICE_NGINX,
    SERVICE_PHP,
)
from lempstack.errors import BootstrapError
from lempstack.models import Credentials, ProjectLayout

DOCKERFILE_TEMPLATE = f"""FROM {PHP_BASE_IMAGE}

# Install dependencies
RUN apk add --no-cache \\
    zip \\
    unzip \\
    git

# Install PHP extensions
RUN docker-php-ext-install pdo pdo_mysql

# Install Composer
RUN curl -sS https://getcomposer.org/installer | php -- --install-dir=/usr/local/bin --filename=composer

WORKDIR {CONTAINER_APP_ROOT}
"""

NGINX_CONF_TEMPLATE = f"""server {{
    listen 80;
    server_name localhost;
    root {CONTAINER_APP_ROOT}/public;
    index index.php;

    location / {{
        try_files $uri $uri/ /index.php?$query_string;
    }}

    location ~ \\.php$ {{
        fastcgi_pass {SERVICE_PHP}:{FPM_PORT};
        fastcgi_index index.php;
        fastcgi_param SCRIPT_FILENAME $document_root$fastcgi_script_name;
        include fastcgi_params;
    }}
}}
"""

WELCOME_PAGE_HEADING = "Hello F K A"
WELCOME_PAGE_LINKS = ("https://laravel.com/docs", "https://github.com/laravel")

WELCOME_PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>This is Title !!!</title>
    <link href="https://cdn.jsdelivr.net/npm/tailwindcss@2.2.19/dist/tailwind.min.css" rel="stylesheet">
</head>
<body class="bg-gradient-to-br from-blue-900 to-black min-h-screen flex items-center justify-center">
    <div class="text-center">
        <h1 class="text-6xl font-bold text-transparent bg-clip-text bg-gradient-to-r from-blue-400 to-purple-500 mb-4">
            Hello F K A
        </h1>
        <p class="text-gray-300 text-xl max-w-md mx-auto leading-relaxed">
            Welcome to your custom Laravel application. Built with ❤️ using LEMP stack.
        </p>
        <div class="mt-8 space-x-4">
            <a href="https://laravel.com/docs" class="inline-block px-6 py-3 bg-blue-500 text-white rounded-lg hover:bg-blue-600 transition-colors duration-300">
                Documentation
            </a>
            <a href="https://github.com/laravel" class="inline-block px-6 py-3 bg-purple-500 text-white rounded-lg hover:bg-purple-600 transition-colors duration-300">
                GitHub
            </a>
        </div>
    </div>
</body>
</html>
"""


def escape_interpolation(value: str) -> str:
    """Compose expands $VAR in the manifest; $$ yields a literal dollar sign."""
    return value.replace("$", "$$")


def build_compose_services(credentials: Credentials, http_port: int = HTTP_PORT) -> Dict[str, Any]:
    app_volume = f"./laravel:{CONTAINER_APP_ROOT}"
    networks: List[str] = [NETWORK_NAME]

    return {
        "services": {
            SERVICE_NGINX: {
                "image": NGINX_IMAGE,
                "container_name": NGINX_CONTAINER,
                "ports": [f"{http_port}:80"],
                "volumes": [app_volume, "./nginx/default.conf:/etc/nginx/conf.d/default.conf"],
                "depends_on": [SERVICE_PHP],
                "networks": list(networks),
            },
            SERVICE_PHP: {
                "build": "./php",
                "container_name": PHP_CONTAINER,
                "volumes": [app_volume],
                "environment": {
                    "DB_CONNECTION": "mysql",
                    "DB_HOST": DB_CONTAINER,
                    "DB_PORT": DB_PORT,
                    "DB_DATABASE": escape_interpolation(credentials.database),
                    "DB_USERNAME": escape_interpolation(credentials.username),
                    "DB_PASSWORD": escape_interpolation(credentials.password),
                },
                "networks": list(networks),
                "command": "php-fpm",
            },
            SERVICE_DB: {
                "image": DB_IMAGE,
                "container_name": DB_CONTAINER,
                "environment": {
                    "MYSQL_ROOT_PASSWORD": escape_interpolation(credentials.root_password),
                    "MYSQL_DATABASE": escape_interpolation(credentials.database),
                    "MYSQL_USER": escape_interpolation(credentials.username),
                    "MYSQL_PASSWORD": escape_interpolation(credentials.password),
                },
                "volumes": ["./mysql:/var/lib/mysql"],
                "networks": list(networks),
            },
        },
        "networks": {NETWORK_NAME: {"driver": "bridge"}},
    }


def render_compose_manifest(credentials: Credentials, http_port: int = HTTP_PORT) -> str:
    return yaml.safe_dump(
        build_compose_services(credentials, http_port=http_port),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def render_dockerfile() -> str:
    return DOCKERFILE_TEMPLATE


def render_nginx_conf() -> str:
    return NGINX_CONF_TEMPLATE


def render_welcome_page() -> str:
    return WELCOME_PAGE_TEMPLATE


class TemplateEmitter:
    """Writes the generated configuration files, always overwriting."""

    def __init__(self, layout: ProjectLayout, logger):
        self.layout = layout
        self.logger = logger

    def write(self, path: str, content: str):
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="\n") as file_obj:
                file_obj.write(content)
        except OSError as exc:
            raise BootstrapError(f"Could not write '{path}': {exc}") from exc
        self.logger.debug("Wrote %s", path)

    def emit_all(self, credentials: Credentials, http_port: int = HTTP_PORT):
        self.write(self.layout.compose_file, render_compose_manifest(credentials, http_port))
        self.write(self.layout.dockerfile, render_dockerfile())
        self.write(self.layout.nginx_conf, render_nginx_conf())
        self.logger.info("Generated docker-compose.yml, php/Dockerfile and nginx/default.conf")

    def emit_welcome_page(self):
        self.write(self.layout.welcome_template, render_welcome_page())
