import sys
from fastapi import FastAPI
import uvicorn
from dotenv import load_dotenv
from trackproxy.config import Settings, ConfigurationError
from trackproxy.interfaces.http.app import create_app

load_dotenv()

try:
    settings = Settings()
except ConfigurationError as e:
    print(f"\nConfiguration Error:\n{e}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"\nUnexpected error during configuration: {e}", file=sys.stderr)
    sys.exit(1)

try:
    app: FastAPI = create_app(settings)
except Exception as e:
    print(f"\nFailed to initialize application: {str(e)}", file=sys.stderr)
    raise SystemExit(1)

if __name__ == "__main__":
    # One worker: the response cache lives in this process
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,
        access_log=False,
    )
