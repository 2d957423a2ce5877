"""Fixed settings for the nesbridge file server."""

# Only this exact peer address is served
LOOPBACK_ADDRESS = "127.0.0.1"
SERVER_PORT = 8080

ENTRY_DOCUMENT = "index.html"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

REJECTION_MESSAGE = """\
-------------------------------------------------------------------
Access Denied!
-------------------------------------------------------------------
Hey there, sneaky!
This server is a private party, and you're not on the guest list.
-------------------------------------------------------------------
It's probably just a skill issue.
-------------------------------------------------------------------
"""
