"""
Send sample GitHub/GitLab webhooks to a locally running notifier.

Usage: python send_test_webhook.py <kind> [--url http://localhost:3000] [--secret S] [--token T]
"""

import argparse
import hashlib
import hmac
import json
import sys

import httpx


def github_comment_payload(pr_author: str = "alice", commenter: str = "reviewer-user",
                           body: str = "Great work! Could you add a unit test for this function?") -> dict:
    """Conversation comment on a PR (issue-comment shape)."""
    return {
        "action": "created",
        "issue": {
            "number": 42,
            "title": "Add new feature for user authentication",
            "html_url": "https://github.com/example/repo/pull/42",
            "user": {"login": pr_author},
            "pull_request": {},
        },
        "comment": {
            "body": body,
            "html_url": "https://github.com/example/repo/pull/42#issuecomment-123456",
            "user": {"login": commenter},
        },
        "repository": {"full_name": "example/repo"},
    }


def github_review_comment_payload(pr_author: str = "alice", commenter: str = "reviewer-user",
                                  body: str = "This should be a `const`.",
                                  path: str = "src/auth/login.js") -> dict:
    """Line comment left during a code review."""
    return {
        "action": "created",
        "pull_request": {
            "number": 42,
            "title": "Add new feature for user authentication",
            "html_url": "https://github.com/example/repo/pull/42",
            "user": {"login": pr_author},
        },
        "comment": {
            "body": body,
            "html_url": "https://github.com/example/repo/pull/42#discussion_r123456",
            "path": path,
            "user": {"login": commenter},
        },
        "repository": {"full_name": "example/repo"},
    }


def github_review_payload(pr_author: str = "alice", reviewer: str = "reviewer-user",
                          state: str = "approved", body: str = "LGTM") -> dict:
    return {
        "action": "submitted",
        "review": {"state": state, "body": body, "user": {"login": reviewer}},
        "pull_request": {
            "number": 42,
            "title": "Add new feature for user authentication",
            "html_url": "https://github.com/example/repo/pull/42",
            "user": {"login": pr_author},
        },
        "repository": {"full_name": "example/repo"},
    }


def github_merge_payload(pr_author: str = "alice", merged_by: str = "maintainer") -> dict:
    return {
        "action": "closed",
        "pull_request": {
            "number": 42,
            "title": "Add new feature for user authentication",
            "html_url": "https://github.com/example/repo/pull/42",
            "merged": True,
            "merged_by": {"login": merged_by},
            "user": {"login": pr_author},
        },
        "repository": {"full_name": "example/repo"},
        "sender": {"login": merged_by},
    }


def gitlab_note_payload(author_id: int = 12345, commenter: str = "reviewer-user",
                        note: str = "Should we add rate limiting to this endpoint?") -> dict:
    return {
        "object_kind": "note",
        "event_type": "note",
        "user": {"username": commenter},
        "project": {"path_with_namespace": "group/project"},
        "merge_request": {
            "title": "Implement OAuth2 integration",
            "url": "https://gitlab.com/group/project/-/merge_requests/15",
            "author_id": author_id,
        },
        "object_attributes": {
            "note": note,
            "noteable_type": "MergeRequest",
            "url": "https://gitlab.com/group/project/-/merge_requests/15#note_123456",
        },
    }


def gitlab_merge_request_payload(author_id: int = 12345, actor: str = "maintainer",
                                 action: str = "merge") -> dict:
    """Merge request hook; ``action`` is ``merge`` or ``approved``."""
    return {
        "object_kind": "merge_request",
        "user": {"username": actor},
        "project": {"path_with_namespace": "group/project"},
        "object_attributes": {
            "action": action,
            "author_id": author_id,
            "title": "Implement OAuth2 integration",
            "url": "https://gitlab.com/group/project/-/merge_requests/15",
        },
    }


SAMPLES = {
    "github": ("github", github_comment_payload),
    "github-review-comment": ("github", github_review_comment_payload),
    "github-approve": ("github", lambda: github_review_payload(state="approved")),
    "github-changes": ("github", lambda: github_review_payload(state="changes_requested", body="Please fix")),
    "github-merge": ("github", github_merge_payload),
    "gitlab": ("gitlab", gitlab_note_payload),
    "gitlab-approve": ("gitlab", lambda: gitlab_merge_request_payload(action="approved")),
    "gitlab-merge": ("gitlab", gitlab_merge_request_payload),
}


def main():
    parser = argparse.ArgumentParser(description="Send a sample webhook to the notifier")
    parser.add_argument("kind", choices=sorted(SAMPLES))
    parser.add_argument("--url", default="http://localhost:3000")
    parser.add_argument("--secret", help="GitHub webhook secret used to sign the body")
    parser.add_argument("--token", help="GitLab webhook token")
    args = parser.parse_args()

    source, build = SAMPLES[args.kind]
    body = json.dumps(build()).encode()
    headers = {"Content-Type": "application/json"}
    if source == "github" and args.secret:
        digest = hmac.new(args.secret.encode(), body, hashlib.sha256).hexdigest()
        headers["X-Hub-Signature-256"] = f"sha256={digest}"
    if source == "gitlab" and args.token:
        headers["X-Gitlab-Token"] = args.token

    url = f"{args.url}/webhook/{source}"
    print(f"Sending test {args.kind} webhook to {url}...")

    try:
        response = httpx.post(url, content=body, headers=headers, timeout=10)
    except httpx.HTTPError as e:
        print(f"Error: {e}")
        print("Make sure the server is running: python main.py")
        sys.exit(1)

    result = response.json()
    print("Response:", json.dumps(result, indent=2))
    if result.get("processed"):
        print("\n✓ Webhook processed successfully! Check your Teams channel.")
    else:
        print(f"\n✗ Webhook was not processed. Reason: {result.get('reason') or result.get('detail')}")


if __name__ == "__main__":
    main()
