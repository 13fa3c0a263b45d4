"""Explanation templates for PhishGuard.

Holds the plain-language descriptions of evidence flags, the deterministic
template explainer, and the prompt handed to LLM-backed explainers.
"""

import json

from ..analyzer.classifier_models import Classification
from .base import BaseExplainer, ExplanationRequest

FLAG_DESCRIPTIONS: dict[str, str] = {
    # Phishing evidence
    "known_phishing_domain": "it is recognized as a previously reported malicious site",
    "suspicious_keywords_in_path": "its address contains wording commonly used to lure visitors",
    "ip_address_as_host": "it uses a raw IP address instead of a registered domain name",
    "unusual_url_structure": "the structure of the address is unusual for a legitimate site",
    "long_url": "the address is unusually long, which can hide its real destination",
    "excessive_special_chars": "the address contains an excessive number of special characters",
    "no_https": "the connection is not protected by HTTPS encryption",
    "domain_impersonation_heuristic": "the address appears to imitate a trusted brand or service",
    "suspicious_keywords": "the address combines several words typical of credential-theft pages",
    "heuristic_detection": "our general heuristics found the address suspicious",
    # Positive evidence
    "trusted_domain": "the site is recognized as a trusted domain",
    "valid_ssl": "it uses a valid SSL certificate for secure communication",
    "good_reputation_score": "it has a good reputation score",
    "general_scan_ok": "a general scan found no warning signs",
}

PHISHING_RISKS = [
    (
        "Credential theft",
        "fake login pages and deceptive forms try to capture usernames, passwords and "
        "financial details, which can lead to account takeover, financial loss or identity theft.",
    ),
    (
        "Malware delivery",
        "the site may try to install harmful software such as viruses, ransomware, "
        "spyware or keyloggers on your device.",
    ),
    (
        "Social engineering",
        "sites like this use urgency and impersonation to manipulate visitors into "
        "acting against their own interests.",
    ),
]

EXPLANATION_PROMPT = """You are a cybersecurity expert specializing in analyzing URLs and explaining their safety status to users in an easy-to-understand manner.
You have been provided with a URL, its classification ('safe' or 'phishing'), and a detailed analysis report.

URL: {url}
Classification: {classification}
Analysis Report: {report}

Start your explanation by clearly stating the classification of the URL.

If the classification is 'phishing':
1. Begin with a sentence like: "Warning: Based on our analysis, the URL '{url}' is classified as **phishing** and is considered potentially dangerous."
2. Explain the specific reasons from the report's detectedFlags and threatType. Mention how confident the system is based on confidenceScore.
3. Describe the potential risks: credential theft, malware distribution and social engineering.
4. Strongly advise the user NOT to visit the website, click any links, download any files, or enter any personal information.

If the classification is 'safe':
1. Begin with a sentence like: "Good news: Based on our analysis, the URL '{url}' is classified as **safe**."
2. Briefly mention positive indicators from the report.
3. Remind the user to remain vigilant, since no detection method is infallible: look for HTTPS, be wary of unexpected requests for information, and keep software updated.

Keep the explanation clear, user-friendly and actionable. Avoid technical jargon where possible.
Respond with the explanation text only.
Explanation: """


def describe_flag(flag: str) -> str:
    """Plain-language reason for an evidence flag."""
    return FLAG_DESCRIPTIONS.get(flag) or f"the check '{flag.replace('_', ' ')}' was triggered"


def _sentence(text: str) -> str:
    return text[:1].upper() + text[1:]


def build_prompt(request: ExplanationRequest) -> str:
    """Render the LLM prompt for a verdict."""
    return EXPLANATION_PROMPT.format(
        url=request.url,
        classification=request.classification.value,
        report=json.dumps(request.verdict.to_dict(), indent=2),
    )


class TemplateExplainer(BaseExplainer):
    """Deterministic explainer that needs no external service."""

    name = "template"

    async def _generate(self, request: ExplanationRequest) -> str:
        if request.classification == Classification.PHISHING:
            return self._phishing_explanation(request)
        return self._safe_explanation(request)

    def _phishing_explanation(self, request: ExplanationRequest) -> str:
        verdict = request.verdict
        lines = [
            f"Warning: Based on our analysis, the URL '{request.url}' is classified as "
            "**phishing** and is considered potentially dangerous.",
            "",
            f"Our confidence in this assessment is {verdict.confidence:.0%}"
            + (f" (threat type: {verdict.threat_type})." if verdict.threat_type != "None" else "."),
            "",
            "Why it was flagged:",
        ]
        for flag in verdict.flags:
            lines.append(f"  - {_sentence(describe_flag(flag))}.")

        lines.extend(["", "Potential risks:"])
        for title, detail in PHISHING_RISKS:
            lines.append(f"  - {title}: {detail}")

        lines.extend([
            "",
            "Do not visit this website, click its links, download any files from it, "
            "or enter any personal information.",
        ])
        return "\n".join(lines)

    def _safe_explanation(self, request: ExplanationRequest) -> str:
        lines = [
            f"Good news: Based on our analysis, the URL '{request.url}' is classified as **safe**.",
        ]
        if request.verdict.flags:
            lines.extend(["", "Positive indicators:"])
            for flag in request.verdict.flags:
                lines.append(f"  - {_sentence(describe_flag(flag))}.")

        lines.extend([
            "",
            "Always stay vigilant when browsing: no detection method is 100% reliable and new "
            "threats appear constantly. Look for HTTPS, be wary of unexpected requests for "
            "information, and keep your software updated.",
        ])
        return "\n".join(lines)
