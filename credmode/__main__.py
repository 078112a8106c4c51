"""Allow running credmode as a module"""

from credmode.cli import main

if __name__ == "__main__":
    main()
