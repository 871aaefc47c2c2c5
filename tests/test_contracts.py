import unittest
from datetime import datetime, timezone

from pydantic import ValidationError

from contracts.aggregate_report import AggregateReport, OverallStatus
from contracts.probe_result import ProbeResult
from contracts.prober_config import ProberConfig
from contracts.target import Target


class TestTargetContract(unittest.TestCase):
    def test_target_fields(self):
        t = Target(key="site", label="Website", url="https://example.com/", method="HEAD")
        self.assertEqual(t.key, "site")
        self.assertEqual(t.label, "Website")
        self.assertEqual(t.url, "https://example.com/")
        self.assertEqual(t.method, "HEAD")

    def test_method_defaults_to_get_and_is_normalised(self):
        self.assertEqual(Target(key="a", label="A", url="u").method, "GET")
        self.assertEqual(Target(key="a", label="A", url="u", method="head").method, "HEAD")

    def test_unsupported_method_rejected(self):
        with self.assertRaises(ValidationError):
            Target(key="a", label="A", url="u", method="POST")

    def test_target_is_immutable(self):
        t = Target(key="a", label="A", url="u")
        with self.assertRaises(ValidationError):
            t.url = "v"

    def test_target_repr(self):
        self.assertIn("Target(key=a", repr(Target(key="a", label="A", url="u")))


class TestProbeResultContract(unittest.TestCase):
    def test_for_target_copies_identity(self):
        t = Target(key="api", label="Public API", url="https://example.com/api")
        r = ProbeResult.for_target(t, ok=True, status=200, latency_ms=12)
        self.assertEqual((r.key, r.label, r.url), ("api", "Public API", "https://example.com/api"))
        self.assertEqual(r.latency_ms, 12)
        self.assertIsNone(r.error)

    def test_latency_serialized_under_wire_name(self):
        r = ProbeResult(key="a", label="A", url="u", ok=False, status=0, latency_ms=5, error="timeout")
        data = r.model_dump(by_alias=True)
        self.assertEqual(data["latency"], 5)
        self.assertNotIn("latency_ms", data)
        self.assertEqual(data["error"], "timeout")

    def test_result_is_immutable(self):
        r = ProbeResult(key="a", label="A", url="u", ok=True, status=200)
        with self.assertRaises(ValidationError):
            r.ok = False


class TestAggregateReportContract(unittest.TestCase):
    def test_json_dict_shape(self):
        report = AggregateReport(
            updated_at=datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            overall=OverallStatus.DEGRADED,
            results=[
                ProbeResult(key="a", label="A", url="u", ok=True, status=200, latency_ms=3),
                ProbeResult(key="b", label="B", url="v", ok=False, latency_ms=8, error="timeout"),
            ],
        )
        data = report.to_json_dict()
        self.assertEqual(set(data), {"updatedAt", "overall", "results"})
        self.assertTrue(data["updatedAt"].startswith("2025-01-02T03:04:05"))
        self.assertEqual(data["overall"], "degraded")
        self.assertEqual(
            data["results"][0],
            {"key": "a", "label": "A", "url": "u", "ok": True, "status": 200, "latency": 3},
        )
        self.assertEqual(data["results"][1]["error"], "timeout")
        self.assertEqual(data["results"][1]["status"], 0)

    def test_overall_must_be_known_status(self):
        with self.assertRaises(ValidationError):
            AggregateReport(updated_at=datetime.now(timezone.utc), overall="unknown")


class TestProberConfigContract(unittest.TestCase):
    def test_defaults(self):
        cfg = ProberConfig()
        self.assertEqual(cfg.timeout_ms, 8000)
        self.assertEqual(cfg.user_agent, "oasis-status/1.0")
        self.assertTrue(cfg.follow_redirects)

    def test_timeout_must_be_positive(self):
        with self.assertRaises(ValidationError):
            ProberConfig(timeout_ms=0)


if __name__ == "__main__":
    unittest.main()
