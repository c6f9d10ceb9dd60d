"""Package entry point for ``python -m meditation_pacer``.

``--serve`` starts the HTTP API with uvicorn; anything else goes to the CLI.
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from meditation_pacer.server.app import run_api
        run_api()
    else:
        from meditation_pacer.cli import main
        main()
