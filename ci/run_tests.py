import pytest
import os
import sys
import traceback

os.chdir(os.path.join(os.path.dirname(os.path.realpath(__file__)), '..'))

try:
	code = pytest.main(["-v", "pairalign/tests"])
except Exception:
	traceback.print_exc()
	raise

if code == 0:
	print("tests ok.")
	sys.exit(0)
else:
	print("tests failed.")
	sys.exit(1)
