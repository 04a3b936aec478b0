"""Software-only simulation / demo - no real systems will be contacted or modified."""
import sys

from .demo import main

if __name__ == "__main__":
    sys.exit(main())
