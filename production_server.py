from waitress import serve
from main import app
import os
import sys

# Ensure current directory is in path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    threads = int(os.environ.get("THREADS", 6))
    print(f"==========================================")
    print(f"RewardToken Ledger Server Started")
    print(f"Access at: http://localhost:{port}")
    print(f"==========================================")

    # Ledger mutations are serialised internally; threads only parallelise I/O
    serve(app, host="0.0.0.0", port=port, threads=threads)
