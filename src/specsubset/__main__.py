"""Allow ``python -m specsubset``."""

from specsubset.app import main

main()
