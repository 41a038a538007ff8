import sys

from rdcalc.rdcalc_cli import main

sys.exit(main())
