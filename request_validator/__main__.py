"""
Request Validator CLI Entry Point
=================================

Allows running the validator as a module: python -m request_validator
"""

from request_validator.cli.main import main

if __name__ == "__main__":
    main()
