from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "recommendation"]
    total = len(requests)

    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Requests made without any food list signal
    cold_starts = sum(1 for r in requests if not r.get("positive_count"))

    positives = [r.get("positive_count", 0) for r in requests]
    avg_positives = round(sum(positives) / total, 2) if total else 0.0

    users = {r.get("user_id") for r in requests if r.get("user_id")}

    top_counter: Counter[str] = Counter()
    for r in requests:
        if r.get("top_restaurant_id"):
            top_counter[r["top_restaurant_id"]] += 1
    top_recommended = [{"id": rid, "count": c} for rid, c in top_counter.most_common(10)]

    return {
        "total_requests": total,
        "unique_users": len(users),
        "avg_response_time_ms": avg_time,
        "avg_positive_labels": avg_positives,
        "cold_start_rate": round(cold_starts / total * 100, 1) if total else 0.0,
        "top_recommended": top_recommended,
    }
