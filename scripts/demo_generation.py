"""Demo script: launch a generation through the API and poll until it ends.

Run with a server on localhost:8000:
    python3 scripts/demo_generation.py "a cat surfing at sunset" VIDEO

The service never waits on an operation; the polling loop below is the
caller's side of the contract.
"""

import sys
import time

import httpx

BASE_URL = "http://localhost:8000"
POLL_INTERVAL = 10
POLL_TIMEOUT = 900


def launch(client: httpx.Client, prompt: str, media_kind: str) -> str:
    resp = client.post("/api/operations", json={"prompt": prompt, "mediaKind": media_kind})
    resp.raise_for_status()
    operation_id = resp.json()["operationId"]
    print("Launched ->", operation_id)
    return operation_id


def wait_for(client: httpx.Client, operation_id: str) -> dict:
    elapsed = 0
    while elapsed < POLL_TIMEOUT:
        resp = client.post("/api/operations/status", json={"operationId": operation_id})
        if resp.status_code >= 500:
            # POLL_ERROR is transient from the caller's point of view
            print("Poll failed, retrying:", resp.json().get("detail"))
        else:
            resp.raise_for_status()
            status = resp.json()
            if status["status"] != "PROCESSING":
                return status
            print(f"[{elapsed:>4}s] still processing...")
        time.sleep(POLL_INTERVAL)
        elapsed += POLL_INTERVAL
    raise TimeoutError(f"Operation {operation_id} not finished after {POLL_TIMEOUT}s")


if __name__ == "__main__":
    prompt = sys.argv[1] if len(sys.argv) > 1 else "a cat"
    media_kind = sys.argv[2] if len(sys.argv) > 2 else "IMAGE"

    with httpx.Client(base_url=BASE_URL, timeout=30.0) as client:
        result = wait_for(client, launch(client, prompt, media_kind))

    if result["status"] == "COMPLETED":
        print("Artifact:", result["artifactUri"])
        print("Public URL:", result["publicUri"])
    else:
        print("Failed:", result["reason"])
