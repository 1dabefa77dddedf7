#!/usr/bin/env python3
"""
Walk through the TaskHub API against a running server.
"""

import requests
import sys
from typing import Optional

# Configuration
BASE_URL = "http://localhost:8000"
NAME = "Demo User"
EMAIL = "demo@taskhub.dev"
PASSWORD = "demo1234"


def get_token(email: str, password: str) -> Optional[str]:
    """Register the demo user, falling back to login if it already exists."""
    print("🔐 Authenticating...")

    response = requests.post(
        f"{BASE_URL}/api/auth/register",
        json={"name": NAME, "email": email, "password": password}
    )

    if response.status_code == 400:
        response = requests.post(
            f"{BASE_URL}/api/auth/login",
            json={"email": email, "password": password}
        )

    if response.status_code in (200, 201):
        print(f"✅ {response.json()['message']}\n")
        return response.json()["data"]["token"]

    print(f"❌ Authentication failed: {response.json()}")
    return None


def run_walkthrough(token: str, title: str):
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json"
    }

    try:
        response = requests.post(
            f"{BASE_URL}/api/tasks",
            headers=headers,
            json={"title": title, "priority": "high"}
        )
        if response.status_code != 201:
            print(f"❌ Create failed: {response.text}")
            return

        task = response.json()["data"]
        task_id = task["_id"]
        print(f"📝 Created task {task_id}: {task['title']} [{task['priority']}]")

        response = requests.get(
            f"{BASE_URL}/api/tasks",
            params={"priority": "high", "limit": 5}
        )
        pagination = response.json()["data"]["pagination"]
        print(f"📋 High priority tasks: {pagination['totalItems']} "
              f"(page {pagination['current']}/{pagination['total']})")

        response = requests.put(
            f"{BASE_URL}/api/tasks/{task_id}",
            headers=headers,
            json={"completed": True}
        )
        print(f"✔️  Marked complete: {response.json()['data']['completed']}")

        response = requests.delete(f"{BASE_URL}/api/tasks/{task_id}", headers=headers)
        print(f"🗑️  {response.json()['message']}")

    except requests.exceptions.RequestException as e:
        print(f"❌ Request error: {e}")


def main():
    """Main function."""
    print("=" * 80)
    print("TaskHub API - Walkthrough")
    print("=" * 80)
    print()

    token = get_token(EMAIL, PASSWORD)
    if not token:
        sys.exit(1)

    if len(sys.argv) > 1:
        title = " ".join(sys.argv[1:])
    else:
        title = "Try out the TaskHub API"

    run_walkthrough(token, title)

    print("\n" + "=" * 80)
    print("🎯 Walkthrough completed!")
    print("=" * 80)


if __name__ == "__main__":
    main()
