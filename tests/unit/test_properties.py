"""Property-based tests for imguploader using Hypothesis.

These tests verify invariant properties of the pure helpers: link
extraction, text rewriting, batching, policy checks, width tiers, progress
accounting, redaction and backoff.  They complement the example-based unit
tests by exercising the code with a wide range of randomly generated
inputs.
"""

from __future__ import annotations

import string

from hypothesis import given, settings
from hypothesis import strategies as st

from imguploader.config import WidthTiers
from imguploader.http.retries import compute_backoff
from imguploader.http.upload import parse_custom_headers
from imguploader.image.extract import extract_image_references
from imguploader.image.policy import is_blacklisted
from imguploader.image.width import classify_width
from imguploader.models import OutcomeStatus, UploadOutcome, UploadProgress
from imguploader.pipeline.batch import apply_outcomes
from imguploader.utils.chunk import chunked
from imguploader.utils.redact import redact

# ---------------------------------------------------------------------------
# Reusable strategies
# ---------------------------------------------------------------------------

_alt_st = st.text(alphabet=string.ascii_letters + string.digits + " ", max_size=12)
_url_st = st.builds(
    lambda host, path: f"https://{host}.test/{path}",
    st.text(alphabet=string.ascii_lowercase, min_size=1, max_size=10),
    st.text(alphabet=string.ascii_lowercase + string.digits + "/.-_", max_size=20),
)
# Filler text that can never form part of an image link.
_filler_st = st.text(alphabet=string.ascii_letters + " \n", max_size=15)


@st.composite
def _documents(draw):
    links = draw(st.lists(st.tuples(_alt_st, _url_st), max_size=8))
    parts = [draw(_filler_st)]
    for alt, url in links:
        parts.append(f"![{alt}]({url})")
        parts.append(draw(_filler_st))
    return "".join(parts), [url for _, url in links]


# ---------------------------------------------------------------------------
# Extraction and rewriting
# ---------------------------------------------------------------------------

class TestExtractionProperties:
    @given(doc=_documents())
    @settings(max_examples=200)
    def test_urls_found_in_document_order(self, doc) -> None:
        text, urls = doc
        assert [ref.url for ref in extract_image_references(text)] == urls

    @given(doc=_documents())
    def test_offsets_slice_the_markup(self, doc) -> None:
        text, _ = doc
        for ref in extract_image_references(text):
            assert text[ref.start:ref.end] == ref.original_markup
            assert ref.url in ref.original_markup

    @given(doc=_documents())
    def test_references_do_not_overlap(self, doc) -> None:
        text, _ = doc
        refs = extract_image_references(text)
        for left, right in zip(refs, refs[1:]):
            assert left.end <= right.start

    @given(doc=_documents())
    def test_passthrough_outcomes_leave_text_unchanged(self, doc) -> None:
        text, _ = doc
        outcomes = [
            UploadOutcome.passthrough(ref, OutcomeStatus.FAILED, "HTTP 500")
            for ref in extract_image_references(text)
        ]
        assert apply_outcomes(text, outcomes) == text

    @given(doc=_documents())
    def test_rewriting_every_url_leaves_none_of_the_originals(self, doc) -> None:
        text, _ = doc
        outcomes = [
            UploadOutcome(
                url=ref.url,
                original_markup=ref.original_markup,
                new_markup=ref.original_markup.replace(ref.url, "http://api.test/x", 1),
                status=OutcomeStatus.SUCCESS,
            )
            for ref in extract_image_references(text)
        ]
        rewritten = apply_outcomes(text, outcomes)
        assert [ref.url for ref in extract_image_references(rewritten)] == ["http://api.test/x"] * len(outcomes)


# ---------------------------------------------------------------------------
# Batching
# ---------------------------------------------------------------------------

class TestChunkedProperties:
    @given(items=st.lists(st.integers(), max_size=50), size=st.integers(min_value=1, max_value=10))
    def test_concatenation_equals_original(self, items: list[int], size: int) -> None:
        assert [x for batch in chunked(items, size) for x in batch] == items

    @given(items=st.lists(st.integers(), min_size=1, max_size=50), size=st.integers(min_value=1, max_value=10))
    def test_batches_bounded_and_non_empty(self, items: list[int], size: int) -> None:
        batches = chunked(items, size)
        assert all(1 <= len(batch) <= size for batch in batches)
        assert all(len(batch) == size for batch in batches[:-1])


# ---------------------------------------------------------------------------
# Policy and width tiers
# ---------------------------------------------------------------------------

class TestPolicyProperties:
    @given(
        domain=st.text(alphabet=string.ascii_lowercase, min_size=1, max_size=12),
        scheme=st.sampled_from(["http://", "https://"]),
        path=st.text(alphabet=string.ascii_lowercase + "/.", max_size=20),
    )
    def test_domain_matches_regardless_of_scheme_and_case(self, domain: str, scheme: str, path: str) -> None:
        url = f"{scheme}{domain.upper()}.test/{path}"
        assert is_blacklisted(url, [f"{domain}.test"])
        assert is_blacklisted(url, [f"https://{domain}.test"])

    @given(url=_url_st)
    def test_blank_entries_never_match(self, url: str) -> None:
        assert not is_blacklisted(url, ["", "   "])


class TestWidthProperties:
    @given(width=st.integers(min_value=1, max_value=20000))
    def test_hint_never_wider_than_image(self, width: int) -> None:
        assert classify_width(width, WidthTiers()) <= width

    @given(width=st.integers(min_value=1601, max_value=20000))
    def test_large_images_share_one_hint(self, width: int) -> None:
        assert classify_width(width, WidthTiers()) == 800


# ---------------------------------------------------------------------------
# Progress accounting
# ---------------------------------------------------------------------------

class TestProgressProperties:
    @given(statuses=st.lists(st.sampled_from(list(OutcomeStatus)), max_size=30))
    def test_counters_sum_to_current(self, statuses: list[OutcomeStatus]) -> None:
        progress = UploadProgress(total=len(statuses))
        for i, status in enumerate(statuses):
            progress.record(
                UploadOutcome(f"u{i}", f"![](u{i})", f"![](u{i})", status, "HTTP 404")
            )
        assert progress.current == len(statuses)
        assert progress.success + progress.failed + progress.skipped + progress.blacklisted == progress.current
        assert len(progress.errors) == progress.failed
        assert progress.current == progress.total
        assert 0 <= progress.percent <= 100


# ---------------------------------------------------------------------------
# Redaction and headers
# ---------------------------------------------------------------------------

class TestRedactProperties:
    @given(
        secret=st.text(alphabet=string.ascii_uppercase + string.digits, min_size=6, max_size=20),
        prefix=st.text(max_size=10),
        suffix=st.text(max_size=10),
    )
    def test_secret_never_survives(self, secret: str, prefix: str, suffix: str) -> None:
        payload = {"headers": {"X-Custom": secret}, "body": f"{prefix}{secret}{suffix}", "list": [secret]}
        result = redact(payload, [secret])
        assert result["headers"]["X-Custom"] == "<redacted>"
        assert secret not in result["body"]
        assert result["list"] == ["<redacted>"]


class TestHeaderProperties:
    @given(lines=st.lists(st.text(max_size=20), max_size=10))
    def test_keys_and_values_trimmed_and_non_empty(self, lines: list[str]) -> None:
        for key, value in parse_custom_headers(lines).items():
            assert key and key == key.strip()
            assert value and value == value.strip()


# ---------------------------------------------------------------------------
# Backoff
# ---------------------------------------------------------------------------

class TestBackoffProperties:
    @given(
        attempt=st.integers(min_value=0, max_value=20),
        base=st.floats(min_value=0.0, max_value=10.0, allow_nan=False),
        maximum=st.floats(min_value=0.0, max_value=3600.0, allow_nan=False),
        jitter=st.booleans(),
    )
    @settings(max_examples=200)
    def test_delay_within_bounds(self, attempt: int, base: float, maximum: float, jitter: bool) -> None:
        delay = compute_backoff(attempt, base=base, maximum=maximum, jitter=jitter)
        assert 0.0 <= delay <= maximum + 1e-9

    @given(
        retry_after=st.floats(min_value=-10.0, max_value=100.0, allow_nan=False),
        maximum=st.floats(min_value=0.0, max_value=60.0, allow_nan=False),
    )
    def test_retry_after_capped(self, retry_after: float, maximum: float) -> None:
        delay = compute_backoff(0, maximum=maximum, jitter=False, retry_after=retry_after)
        assert 0.0 <= delay <= maximum
