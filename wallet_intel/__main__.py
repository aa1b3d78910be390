"""Allow ``python -m wallet_intel``."""
from .cli import main

if __name__ == "__main__":
    main()
