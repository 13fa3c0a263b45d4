"""Tests for the heuristic URL classifier."""

import pytest

from phishguard.analyzer.classifier import HeuristicClassifier, make_random_source, seeded_random_source
from phishguard.analyzer.classifier_models import Classification, ThreatType, Verdict
from phishguard.analyzer.features import extract_features
from phishguard.analyzer.metrics import metrics
from phishguard.config import HeuristicsConfig


def fixed_source(value: float):
    return lambda url: value


@pytest.fixture
def classifier():
    """Classifier whose fallback draw always lands on the safe side."""
    return HeuristicClassifier(random_source=fixed_source(0.1))


def classify(classifier: HeuristicClassifier, url: str) -> Verdict:
    return classifier.classify(url, extract_features(url, classifier.heuristics.keywords))


class TestRuleTiers:
    """Each tier produces its fixed verdict."""

    def test_known_phishing_domain(self, classifier):
        verdict = classify(classifier, "https://phishing.example.com/login")
        assert verdict.classification == Classification.PHISHING
        assert verdict.confidence == 0.95
        assert verdict.flags == ("known_phishing_domain", "suspicious_keywords_in_path")
        assert verdict.threat_type == ThreatType.KNOWN_PHISHING.value
        assert verdict.rule == "known_phishing"

    def test_denylist_matches_anywhere_in_url(self, classifier):
        verdict = classify(classifier, "https://cdn.example.net/redirect/malicious-site.org/x")
        assert "known_phishing_domain" in verdict.flags

    def test_ip_literal_host(self, classifier):
        verdict = classify(classifier, "https://10.0.0.5/account")
        assert verdict.classification == Classification.PHISHING
        assert verdict.confidence == 0.80
        assert verdict.flags == ("ip_address_as_host", "unusual_url_structure")

    def test_trusted_domain(self, classifier):
        verdict = classify(classifier, "https://github.com")
        assert verdict.classification == Classification.SAFE
        assert verdict.confidence == 0.99
        assert "trusted_domain" in verdict.flags
        assert verdict.threat_type == "None"

    def test_trusted_domain_over_https_claims_tls(self, classifier):
        verdict = classify(classifier, "https://github.com/login")
        assert verdict.flags == ("trusted_domain", "valid_ssl", "good_reputation_score")

    def test_trusted_domain_over_http_has_no_tls_flag(self, classifier):
        verdict = classify(classifier, "http://github.com/login")
        assert verdict.classification == Classification.SAFE
        assert verdict.rule == "trusted_domain"
        assert verdict.flags == ("trusted_domain", "good_reputation_score")

    def test_trusted_domain_with_subdomain(self, classifier):
        verdict = classify(classifier, "https://gist.github.com/someone")
        assert verdict.rule == "trusted_domain"

    def test_long_url_with_special_chars_without_https(self, classifier):
        url = "http://example.net/" + "a-b_c" * 15 + "?q=1&r=2"
        assert len(url) > 75
        verdict = classify(classifier, url)
        assert verdict.classification == Classification.PHISHING
        assert verdict.confidence == 0.70
        assert verdict.flags == ("long_url", "excessive_special_chars", "no_https")

    def test_long_url_over_https_is_not_structural_phishing(self, classifier):
        url = "https://example.net/" + "a-b_c" * 15 + "?q=1&r=2"
        verdict = classify(classifier, url)
        assert verdict.rule == "random_fallback"

    def test_keyword_impersonation(self, classifier):
        verdict = classify(classifier, "http://login-very-secure-bank.com")
        assert verdict.classification == Classification.PHISHING
        assert verdict.confidence == 0.90
        assert verdict.flags[0] == "domain_impersonation_heuristic"
        assert verdict.threat_type == ThreatType.BRAND_IMPERSONATION.value

    def test_single_keyword_is_not_enough(self, classifier):
        verdict = classify(classifier, "http://example.org/login")
        assert verdict.rule == "random_fallback"

    def test_keywords_over_https_fall_through(self, classifier):
        verdict = classify(classifier, "https://login-very-secure-bank.com")
        assert verdict.rule == "random_fallback"


class TestRulePriority:
    """The first matching tier wins."""

    def test_denylist_beats_ip_literal(self, classifier):
        heuristics = HeuristicsConfig(denylist=frozenset({"10.0.0.5"}))
        c = HeuristicClassifier(heuristics=heuristics, random_source=fixed_source(0.1))
        verdict = classify(c, "http://10.0.0.5/")
        assert verdict.rule == "known_phishing"
        assert verdict.confidence == 0.95

    def test_ip_literal_beats_allowlist(self):
        heuristics = HeuristicsConfig(allowlist=frozenset({"192.168"}))
        c = HeuristicClassifier(heuristics=heuristics, random_source=fixed_source(0.1))
        verdict = classify(c, "https://192.168.1.1/")
        assert verdict.rule == "ip_literal_host"

    def test_allowlist_beats_keyword_rule(self, classifier):
        verdict = classify(classifier, "http://accounts.google.com/login/verify")
        assert verdict.rule == "trusted_domain"

    def test_only_matching_tier_flags_are_emitted(self, classifier):
        verdict = classify(classifier, "https://phishing.example.com/login-secure-bank")
        assert "domain_impersonation_heuristic" not in verdict.flags


class TestRandomFallback:
    """The catch-all tier is driven by the injected random source."""

    def test_draw_above_threshold_is_phishing(self):
        c = HeuristicClassifier(random_source=fixed_source(0.9))
        verdict = classify(c, "https://unknown-site.example")
        assert verdict.classification == Classification.PHISHING
        assert verdict.confidence == 0.65
        assert verdict.flags == ("heuristic_detection",)

    def test_draw_at_threshold_is_safe(self):
        c = HeuristicClassifier(random_source=fixed_source(0.5))
        verdict = classify(c, "https://unknown-site.example")
        assert verdict.classification == Classification.SAFE
        assert verdict.confidence == 0.85
        assert verdict.flags == ("general_scan_ok",)

    def test_threshold_is_configurable(self):
        heuristics = HeuristicsConfig(fallback_threshold=0.95)
        c = HeuristicClassifier(heuristics=heuristics, random_source=fixed_source(0.9))
        assert classify(c, "https://unknown-site.example").classification == Classification.SAFE

    def test_source_receives_url(self):
        seen = []

        def source(url):
            seen.append(url)
            return 0.0

        c = HeuristicClassifier(random_source=source)
        classify(c, "https://unknown-site.example/page")
        assert seen == ["https://unknown-site.example/page"]

    def test_earlier_tiers_never_draw(self):
        def source(url):
            raise AssertionError("random source should not be consulted")

        c = HeuristicClassifier(random_source=source)
        assert classify(c, "https://phishing.example.com/").rule == "known_phishing"
        assert classify(c, "https://github.com").rule == "trusted_domain"

    def test_seeded_source_is_reproducible(self):
        source = seeded_random_source(42)
        urls = [f"https://site{i}.example" for i in range(20)]
        first = [source(u) for u in urls]
        second = [source(u) for u in urls]
        assert first == second
        assert all(0.0 <= draw < 1.0 for draw in first)
        assert len(set(first)) > 1

    def test_seeded_classification_is_idempotent(self):
        c = HeuristicClassifier(random_source=make_random_source(7))
        url = "https://no-rule-matches.example/page"
        assert classify(c, url) == classify(c, url)

    def test_unseeded_source_draws_in_range(self):
        source = make_random_source(None)
        assert 0.0 <= source("https://x.example") < 1.0


class TestVerdict:
    """Verdict model invariants."""

    def test_duplicate_flags_are_dropped_in_order(self):
        verdict = Verdict(Classification.PHISHING, 0.5, flags=("a", "b", "a", "c"))
        assert verdict.flags == ("a", "b", "c")

    def test_confidence_range_enforced(self):
        with pytest.raises(ValueError):
            Verdict(Classification.SAFE, 1.5)

    def test_to_dict_report_shape(self):
        verdict = Verdict(Classification.SAFE, 0.99, flags=("trusted_domain",))
        assert verdict.to_dict() == {
            "classification": "safe",
            "confidenceScore": 0.99,
            "detectedFlags": ["trusted_domain"],
            "threatType": "None",
        }


def test_classify_leaves_metrics_untouched(classifier):
    classify(classifier, "https://github.com")
    classify(classifier, "https://phishing.example.com/")
    summary = metrics.get_summary()
    assert summary["rules"] == {}
    assert summary["classifications"] == {}
