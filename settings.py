from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Client registration (supplied by the embedding application, no defaults)
CLIENT_ID = config.get("PLATFORM_CLIENT_ID", None)
REDIRECT_URI = config.get("PLATFORM_REDIRECT_URI", None)

# Penn Labs Platform identity provider
PLATFORM_URL = config.get("PLATFORM_URL", "https://platform.pennlabs.org")
AUTHORIZE_PATH = "/accounts/authorize/"
TOKEN_PATH = "/accounts/token/"
INTROSPECT_PATH = "/accounts/introspect/"
SCOPES = "read introspection"

# Total timeout for each request to the platform, in seconds
REQUEST_TIMEOUT = config.get("PLATFORM_REQUEST_TIMEOUT", 30.0)

# Refresh token storage
TOKEN_FILE = config.get("PLATFORM_TOKEN_FILE", "~/.platform-login/credentials.json")
REFRESH_TOKEN_KEY = "Labs Refresh Token"

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "warning")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "platform_login_debug.log")
