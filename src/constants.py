"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1


class VersionSource(Enum):
    """Where a requested PHP version came from.

    Args:
        Enum (string): Provenance of a version declaration.
    """

    OPTIONS_FILE = "options-file"
    COMPOSER = "dependency-manifest-constraint"
    NONE = "none"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Declarative sources
    BP_CONFIG_DIR = ".bp-config"
    OPTIONS_FILE = "options.json"
    COMPOSER_FILE = "composer.json"
    MANIFEST_FILE = "manifest.yml"
    ENV_COMPOSER_PATH = "COMPOSER_PATH"
    ENV_COMPOSER_TOKEN = "COMPOSER_GITHUB_OAUTH_TOKEN"
    ENV_BUILDPACK_DIR = "BUILDPACK_DIR"
    ENV_CF_STACK = "CF_STACK"
    ENV_LOG_LEVEL = "BP_LOG_LEVEL"
    ENV_DEBUG = "BP_DEBUG"

    # Catalog dependency names
    DEP_PHP = "php"
    DEP_HTTPD = "httpd"
    DEP_COMPOSER = "composer"

    PHP_ALIAS_PATTERN = r"PHP_(\d)(\d)_LATEST"
    COMPOSER_EXT_PREFIX = "ext-"
    COMPOSER_PDO_PREFIX = "ext-pdo_"
    PDO_EXTENSION = "pdo"
    DEFAULT_PHP_EXTENSIONS = ("bz2", "zlib", "curl", "mcrypt")
    DEFAULT_ZEND_EXTENSIONS = ()
    RUNTIME_FORCED_EXTENSIONS = ("openssl",)

    DEFAULT_WEBDIR = ""
    DEFAULT_LIBDIR = "lib"
    DEFAULT_ADMIN_EMAIL = "admin@localhost"
    PHP_FPM_LISTEN = "127.0.0.1:9000"

    # Template handling
    LEGACY_TOKENS = (
        ("@{DEPS_DIR}", "{{ DEPS_DIR }}"),
        ("@{TMPDIR}", "{{ TMPDIR }}"),
        ("@{HOME}", "{{ HOME }}"),
        ("#PHP_FPM_LISTEN", "{{ PhpFpmListen }}"),
    )
    STAGE_CONFIG_ROOT = "/tmp/php_etc"
    STAGE_TMPDIR = "/tmp"
    RUN_HOME = "${HOME}"
    RUN_DEPS_DIR = "${DEPS_DIR}"
    RUN_TMPDIR = "${TMPDIR}"
    PHP_CONF_DEST = "php/etc"
    HTTPD_CONF_DEST = "httpd/conf"

    # Generated artefacts
    START_SCRIPT = "php_buildpack_start"
    PROFILE_D_SCRIPT = "bp_env_vars.sh"
    VERIFY_BINARY = "varify"
    RELEASE_YAML = "/tmp/php-buildpack-release-step.yml"
    OUTPUT_INDENT = "       "

    # Network
    GITHUB_RATE_LIMIT_URL = "https://api.github.com/rate_limit"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    DOWNLOAD_CHUNK_SIZE = 64 * 1024

    LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
