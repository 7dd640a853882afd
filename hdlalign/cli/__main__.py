"""Allow ``python -m hdlalign.cli``."""

from . import main

if __name__ == '__main__':
    main()
