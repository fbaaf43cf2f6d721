"""
Manual smoke test against a running OpenLabel backend.
Usage: python scripts/verify_api.py [path/to/song.mp3]
"""
import httpx
import asyncio
import os
import sys

PORT = os.environ.get("PORT", "3000")
BASE_URL = f"http://127.0.0.1:{PORT}"

async def test_api(song_path=None):
    async with httpx.AsyncClient(base_url=BASE_URL, trust_env=False, timeout=120.0) as client:
        print(f"Checking {BASE_URL}/ ...")
        response = await client.get("/")
        print(f"Status Code: {response.status_code} -> {response.text}")

        for path, field in (("/generate-lyrics", "lyrics"), ("/generate-cover-art", "imageUrl")):
            payload = {"prompt": "a bittersweet summer road trip"}
            print(f"\nSending request to {path} with {payload}...")
            try:
                response = await client.post(path, json=payload)
                data = response.json()
                print(f"Status Code: {response.status_code}")
                if data.get("success") and data.get(field):
                    print(f"✅ Verification SUCCESS: {field} = {data[field][:200]}")
                else:
                    print(f"❌ Verification FAILED: {data}")
            except Exception as e:
                print(f"Request Failed: {e}")

        if song_path:
            print(f"\nUploading {song_path} to /analyze-song...")
            with open(song_path, "rb") as f:
                files = {"file": (os.path.basename(song_path), f.read(), "audio/mpeg")}
            response = await client.post("/analyze-song", files=files)
            print(f"Status Code: {response.status_code}")
            print(response.json())

if __name__ == "__main__":
    asyncio.run(test_api(sys.argv[1] if len(sys.argv) > 1 else None))
