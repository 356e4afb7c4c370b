"""
End-to-end walk through the admin flow against a running server:
login -> candidate -> questions -> template -> session -> terminate -> cleanup.

Requires an existing admin (see scripts/create_admin.py) given through
SMOKE_ADMIN_EMAIL / SMOKE_ADMIN_PASSWORD.
"""

import os
import random
import string

import httpx

from smoke_utils import API, BASE_URL, auth_headers, print_result, safe_call


def rand_str(n: int = 8) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=n))


def main() -> None:
    email = os.environ["SMOKE_ADMIN_EMAIL"]
    password = os.environ["SMOKE_ADMIN_PASSWORD"]

    with httpx.Client(base_url=BASE_URL, timeout=30.0) as client:
        r, err = safe_call(client, "GET", f"{API}/health")
        print_result("GET /api/health", r, err)

        r, err = safe_call(client, "POST", f"{API}/auth/login", json={"email": email, "password": password})
        print_result("POST /api/auth/login", r, err)
        if not r or r.status_code != 202:
            return
        headers = auth_headers(r.json()["token"])

        candidate_email = f"{rand_str()}@example.com"
        r, err = safe_call(client, "POST", f"{API}/candidates", headers=headers, json={"email": candidate_email, "name": "Smoke Candidate"})
        print_result("POST /api/candidates", r, err)
        candidate_id = r.json().get("id") if r is not None and r.status_code == 201 else None

        question_ids = []
        for idx in range(2):
            r, err = safe_call(
                client,
                "POST",
                f"{API}/questions",
                headers=headers,
                json={"title": f"Smoke question {idx}", "content": f"# Question {idx}\n\nExplain `{rand_str()}`."},
            )
            print_result("POST /api/questions", r, err)
            if r is not None and r.status_code == 201:
                question_ids.append(r.json()["id"])

        r, err = safe_call(client, "POST", f"{API}/templates", headers=headers, json={"name": "Smoke template", "questionIds": question_ids})
        print_result("POST /api/templates", r, err)
        template_id = r.json().get("id") if r is not None and r.status_code == 201 else None

        r, err = safe_call(client, "POST", f"{API}/sessions", headers=headers, json={"candidateId": candidate_id, "templateId": template_id})
        print_result("POST /api/sessions", r, err)
        session_id = r.json().get("id") if r is not None and r.status_code == 201 else None

        r, err = safe_call(client, "GET", f"{API}/sessions", headers=headers)
        print_result("GET /api/sessions", r, err)

        r, err = safe_call(client, "GET", f"{API}/dashboard", headers=headers)
        print_result("GET /api/dashboard", r, err)

        if session_id:
            r, err = safe_call(client, "POST", f"{API}/sessions/{session_id}/terminate", headers=headers)
            print_result("POST /api/sessions/{id}/terminate", r, err)
            r, err = safe_call(client, "DELETE", f"{API}/sessions/{session_id}", headers=headers)
            print_result("DELETE /api/sessions/{id}", r, err)
        if template_id:
            r, err = safe_call(client, "DELETE", f"{API}/templates/{template_id}", headers=headers)
            print_result("DELETE /api/templates/{id}", r, err)
        for question_id in question_ids:
            r, err = safe_call(client, "DELETE", f"{API}/questions/{question_id}", headers=headers)
            print_result("DELETE /api/questions/{id}", r, err)
        if candidate_id:
            r, err = safe_call(client, "DELETE", f"{API}/candidates/{candidate_id}", headers=headers)
            print_result("DELETE /api/candidates/{id}", r, err)


if __name__ == "__main__":
    main()
