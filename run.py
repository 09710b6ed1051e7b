# run.py

import uvicorn
import os

# Hosting platforms provide PORT
port = int(os.environ.get("PORT", 8000))

if __name__ == "__main__":
    uvicorn.run(
        "council_portal.main:app",
        host="0.0.0.0",
        port=port,
        reload=False
    )
