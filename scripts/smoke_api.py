"""
Backend API smoke check.

Walks a running server through a typical shift: login, start shift, admit
a PCI patient, complete the generated task, download the report, logout.

Run: python scripts/smoke_api.py
"""
import json
import sys
import time

import requests

BASE_URL = "http://localhost:8000"


def print_step(name: str):
    """Print step header."""
    print(f"\n{'='*70}")
    print(f"{name}")
    print(f"{'='*70}")


def check_health():
    print_step("STEP 1: Health Check")

    response = requests.get(f"{BASE_URL}/api/health")
    print(f"Status: {response.status_code}")
    print(f"Response: {json.dumps(response.json(), indent=2)}")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def login(username: str = "john", password: str = "password") -> dict:
    print_step(f"STEP 2: Login as {username}")

    response = requests.post(f"{BASE_URL}/api/auth/login", json={"username": username, "password": password})
    print(f"Status: {response.status_code}")
    assert response.status_code == 200, response.text

    body = response.json()
    print(f"Signed in as {body['user']['full_name']}")
    return {"X-Session-Token": body["token"]}


def start_shift(headers: dict) -> dict:
    print_step("STEP 3: Start Shift")

    response = requests.post(f"{BASE_URL}/api/shifts/start", json={"notes": "Smoke check"}, headers=headers)
    assert response.status_code == 200, response.text
    shift = response.json()["shift"]
    print(f"Shift {shift['id']} team: {shift['team_members']}")
    return shift


def admit_patient(headers: dict) -> dict:
    print_step("STEP 4: Admit PCI Patient")

    form = {
        "name": "Smoke Test Patient",
        "birth_year": 1960,
        "country": "Germany",
        "diagnosis": "STEMI",
        "department": "Coronary Unit",
        "room_number": "1",
        "pci_access": {"radial": True, "femoral": True, "periprocedural_heparin": True},
    }
    response = requests.post(f"{BASE_URL}/api/patients", json=form, headers=headers)
    assert response.status_code == 201, response.text

    body = response.json()
    print(f"Activity: {body['activity']['description']}")
    for task in body.get("generated_tasks", []):
        print(f"  - {task['title']} due {task['due_time']} ({task['priority']})")
    if "warning" in body:
        print(f"Warning: {body['warning']}")
    return body


def complete_task(headers: dict, task_id: str):
    print_step("STEP 5: Complete Task")

    response = requests.post(f"{BASE_URL}/api/tasks/{task_id}/toggle", headers=headers)
    assert response.status_code == 200, response.text
    print(f"Completed: {response.json()['task']['title']}")


def download_report(headers: dict):
    print_step("STEP 6: Download Report")

    response = requests.get(f"{BASE_URL}/api/reports/download", headers=headers)
    assert response.status_code == 200, response.text
    print(response.headers.get("content-disposition"))
    print(response.text)


def logout(headers: dict):
    print_step("STEP 7: Logout")

    response = requests.post(f"{BASE_URL}/api/auth/logout", headers=headers)
    assert response.status_code == 200, response.text
    print("Workspace closed")


def run_all():
    try:
        check_health()
        headers = login()
        start_shift(headers)
        body = admit_patient(headers)
        if body.get("generated_tasks"):
            complete_task(headers, body["generated_tasks"][0]["id"])
        download_report(headers)
        logout(headers)

        print("\n" + "="*70)
        print("ALL SMOKE CHECKS PASSED")
        print("="*70)
        return True

    except requests.exceptions.ConnectionError:
        print("\nERROR: Cannot connect to backend server")
        print(f"   Make sure server is running on {BASE_URL}")
        print("   Run: python -m wardshift.run")
        return False
    except AssertionError as e:
        print(f"\nCheck failed: {e}")
        return False


if __name__ == "__main__":
    print(f"\nStarting smoke check against {BASE_URL}...")
    time.sleep(1)

    sys.exit(0 if run_all() else 1)
