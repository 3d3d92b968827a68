import sys

from invitegate.app import create_app
from invitegate.config import Settings
from invitegate.exceptions import ConfigError


def main():
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    app = create_app(settings)
    app.run(host='0.0.0.0', port=settings.port, debug=settings.debug)


if __name__ == '__main__':
    main()
