from mas_heavy.core.review import MAX_PATCH_CHARS, RECOMMENDATIONS, review_patch

GOOD = "diff --git a/f b/f\n--- a/f\n+++ b/f\n@@ -1 +1 @@\n-a\n+b\n"


def test_clean_patch_is_low_risk():
	result = review_patch(GOOD)
	assert result.findings == []
	assert result.risk == "low"
	assert result.recommendations == RECOMMENDATIONS


def test_missing_hunks():
	result = review_patch("just text")
	assert result.findings == [
	    "Patch does not include unified diff hunks (@@)."
	]
	assert result.risk == "medium"


def test_large_patch():
	result = review_patch(GOOD + "+x\n" * (MAX_PATCH_CHARS // 3))
	assert "Patch is large; consider splitting into smaller changes." in (
	    result.findings)


def test_patch_at_limit_is_not_large():
	patch = GOOD + "x" * (MAX_PATCH_CHARS - len(GOOD))
	assert review_patch(patch).findings == []


def test_todo_and_fixme_markers():
	assert review_patch(GOOD + "+# TODO\n").findings == [
	    "Patch contains TODO/FIXME markers."
	]
	assert review_patch(GOOD + "+# FIXME\n").risk == "medium"


def test_criteria_echoed():
	result = review_patch(GOOD, ["security", "style"])
	assert result.findings == ["Custom criteria evaluated: security, style."]
	assert result.risk == "medium"
