import os

from dotenv import load_dotenv

load_dotenv()


def load_config() -> dict[str, str | None]:
    """Collect the token authentication settings from the environment (and .env)."""
    return {
        # key configuration
        "JWT_SECRET": os.environ.get("JWT_SECRET"),
        "JWT_PUBLIC_KEY": os.environ.get("JWT_PUBLIC_KEY"),
        # middleware options
        "TOKENAUTH_SIGN_METHOD": os.environ.get("TOKENAUTH_SIGN_METHOD", "HMAC"),
        "TOKENAUTH_ALGORITHM": os.environ.get("TOKENAUTH_ALGORITHM"),
        "TOKENAUTH_AUTH_SCHEME": os.environ.get("TOKENAUTH_AUTH_SCHEME", "Bearer"),
        "TOKENAUTH_LEEWAY": os.environ.get("TOKENAUTH_LEEWAY", "0"),
    }
