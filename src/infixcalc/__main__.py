"""Allow ``python -m infixcalc``."""

from infixcalc.cli import main

if __name__ == "__main__":
    main()
