import sys

from .cli import dtsdup_main

sys.exit(dtsdup_main())
