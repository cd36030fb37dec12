from lempstack.services.settings import EnvSettings

LARAVEL_ENV = """APP_NAME=Laravel
APP_KEY=base64:abc=

DB_CONNECTION=sqlite
# DB_HOST=127.0.0.1
# DB_PORT=3306
# DB_DATABASE=laravel
# DB_USERNAME=root
# DB_PASSWORD=

SESSION_DRIVER=database
"""


def test_parse_exposes_active_keys_only():
    settings = EnvSettings.parse(LARAVEL_ENV)

    assert settings.keys() == ["APP_NAME", "APP_KEY", "DB_CONNECTION", "SESSION_DRIVER"]
    assert settings.get("APP_KEY") == "base64:abc="
    assert settings.get("DB_DATABASE") is None


def test_set_updates_uncomments_and_appends():
    settings = EnvSettings.parse(LARAVEL_ENV)

    assert settings.set("DB_CONNECTION", "mysql") == "updated"
    assert settings.set("DB_DATABASE", "laravel_db") == "uncommented"
    assert settings.set("REDIS_HOST", "redis") == "appended"

    output = settings.serialize()
    assert "DB_CONNECTION=mysql\n" in output
    assert "DB_DATABASE=laravel_db\n" in output
    assert "# DB_DATABASE" not in output
    assert output.endswith("REDIS_HOST=redis\n")
    assert output.index("DB_DATABASE=laravel_db") < output.index("SESSION_DRIVER")


def test_serialize_preserves_untouched_lines():
    settings = EnvSettings.parse(LARAVEL_ENV)

    assert settings.serialize() == LARAVEL_ENV


def test_classic_env_keys_are_replaced_in_place():
    settings = EnvSettings.parse("DB_DATABASE=laravel\nDB_USERNAME=root\nDB_PASSWORD=\n")

    settings.set("DB_DATABASE", "laravel_db")
    settings.set("DB_USERNAME", "popo")
    settings.set("DB_PASSWORD", "baba4678")

    assert settings.serialize() == "DB_DATABASE=laravel_db\nDB_USERNAME=popo\nDB_PASSWORD=baba4678\n"


def test_values_with_special_characters_are_quoted():
    settings = EnvSettings.parse("DB_PASSWORD=\n")

    settings.set("DB_PASSWORD", 'p a"ss#')

    assert settings.serialize() == 'DB_PASSWORD="p a\\"ss#"\n'
    assert settings.get("DB_PASSWORD") == 'p a"ss#'


def test_quoted_values_are_unquoted_on_parse():
    settings = EnvSettings.parse('APP_NAME="My App"\n')

    assert settings.get("APP_NAME") == "My App"


def test_values_with_dollar_signs_are_single_quoted():
    settings = EnvSettings.parse("DB_PASSWORD=\n")

    settings.set("DB_PASSWORD", "a${b}c$d")

    assert settings.serialize() == "DB_PASSWORD='a${b}c$d'\n"
    assert EnvSettings.parse(settings.serialize()).get("DB_PASSWORD") == "a${b}c$d"


def test_values_with_dollar_and_single_quote_escape_the_dollar():
    settings = EnvSettings.parse("DB_PASSWORD=\n")

    settings.set("DB_PASSWORD", "it's$HOME")

    assert settings.serialize() == 'DB_PASSWORD="it\'s\\$HOME"\n'
