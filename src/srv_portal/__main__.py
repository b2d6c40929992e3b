"""Allow ``python -m srv_portal``."""

from .main import main

if __name__ == "__main__":
    main()
