#!/usr/bin/env python3
"""
Smoke test script for a running Zoovie Social API.
Walks two users through the whole friend request lifecycle over HTTP.

Tokens are minted locally with the server's JWT secret, and both user
profiles must already exist in the database.
"""

import asyncio
import httpx

from zoovie_social.core.security import create_access_token

BASE_URL = "http://127.0.0.1:8393"
API_URL = f"{BASE_URL}/api/v1"

ALICE = "u-1"
BOB = "u-2"


def headers_for(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


async def test_health_endpoint():
    """Test the health check endpoint."""
    print("Testing health endpoint...")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{BASE_URL}/health")
            print(f"Status: {response.status_code}")
            print(f"Response: {response.json()}")
            return response.status_code == 200
        except Exception as e:
            print(f"Health check failed: {e}")
            return False


async def test_root_endpoint():
    """Test the root endpoint."""
    print("\nTesting root endpoint...")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{BASE_URL}/")
            print(f"Status: {response.status_code}")
            print(f"Response: {response.json()}")
            return response.status_code == 200
        except Exception as e:
            print(f"Root endpoint failed: {e}")
            return False


async def test_friend_lifecycle():
    """Send, accept and remove a friendship between Alice and Bob."""
    print("\nTesting friend lifecycle...")

    async with httpx.AsyncClient(base_url=API_URL) as client:
        try:
            sent = await client.post("/friends", json={"receiverId": BOB}, headers=headers_for(ALICE))
            print(f"Send: {sent.status_code} {sent.json()}")
            if sent.status_code != 201:
                return False
            request_id = sent.json()["id"]

            pending = await client.get("/friends/requests", headers=headers_for(BOB))
            print(f"Bob's requests: {pending.json()}")

            accepted = await client.patch(
                f"/friends/{request_id}", json={"action": "accept"}, headers=headers_for(BOB)
            )
            print(f"Accept: {accepted.status_code}")

            status = await client.get(f"/friends/status/{BOB}", headers=headers_for(ALICE))
            print(f"Alice sees: {status.json()}")

            removed = await client.delete(f"/friends/{request_id}", headers=headers_for(ALICE))
            print(f"Remove: {removed.status_code}")

            return accepted.status_code == 200 and removed.status_code == 204
        except Exception as e:
            print(f"Friend lifecycle failed: {e}")
            return False


async def test_duplicate_request():
    """A reverse request while one is pending is rejected with 409."""
    print("\nTesting duplicate request...")

    async with httpx.AsyncClient(base_url=API_URL) as client:
        try:
            first = await client.post("/friends", json={"receiverId": BOB}, headers=headers_for(ALICE))
            second = await client.post("/friends", json={"receiverId": ALICE}, headers=headers_for(BOB))
            print(f"First: {first.status_code}, second: {second.status_code}")

            if first.status_code == 201:
                await client.patch(
                    f"/friends/{first.json()['id']}", json={"action": "decline"}, headers=headers_for(BOB)
                )
            return second.status_code == 409
        except Exception as e:
            print(f"Duplicate request test failed: {e}")
            return False


async def run_all_tests():
    """Run all tests sequentially."""
    print("Starting Zoovie Social API smoke tests")
    print("=" * 60)

    tests = [
        ("Health Check", test_health_endpoint),
        ("Root Endpoint", test_root_endpoint),
        ("Friend Lifecycle", test_friend_lifecycle),
        ("Duplicate Request", test_duplicate_request),
    ]

    results = []

    for test_name, test_func in tests:
        print(f"\n{'=' * 20} {test_name} {'=' * 20}")
        try:
            result = await test_func()
            results.append((test_name, result))
        except Exception as e:
            print(f"{test_name} crashed: {e}")
            results.append((test_name, False))

    # Summary
    print(f"\n{'=' * 60}")
    print("TEST SUMMARY")
    print("=" * 60)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for test_name, result in results:
        status = "PASS" if result else "FAIL"
        print(f"{test_name:.<30} {status}")

    print(f"\nTotal: {passed}/{total} tests passed")


if __name__ == "__main__":
    print(f"Make sure the server is running on {BASE_URL}")
    print("Run: python run.py")
    print()

    try:
        asyncio.run(run_all_tests())
    except KeyboardInterrupt:
        print("\nTests interrupted by user")
