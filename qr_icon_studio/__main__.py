import sys

from qr_icon_studio.cli import main

sys.exit(main())
