"""API Dispatch

Configuration-driven client for named external HTTP APIs.
"""

from importlib.metadata import PackageNotFoundError, version

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    __version__ = version("api-dispatch")
except PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.1.0"
__author__ = "API Dispatch"
