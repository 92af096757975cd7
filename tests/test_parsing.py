import pytest

from mas_heavy.utils.parsing import load_json_object


def test_plain_object():
	assert load_json_object('{"a": 1}') == {"a": 1}


def test_surrounding_whitespace_ignored():
	assert load_json_object('\n  {"a": 1}  \n') == {"a": 1}


def test_fenced_object_rejected():
	text = "```json\n{\"a\": 1}\n```"
	with pytest.raises(ValueError):
		load_json_object(text)


def test_object_surrounded_by_prose_rejected():
	with pytest.raises(ValueError):
		load_json_object('Sure! {"a": 1} Hope this helps.')


def test_braces_inside_strings_kept():
	text = '{"patch": "@@ -1 +1 @@\\n-}\\n+{", "ok": true}'
	assert load_json_object(text) == {"patch": "@@ -1 +1 @@\n-}\n+{",
	                                  "ok": True}


@pytest.mark.parametrize("text", ["", "   ", "\n"])
def test_empty_rejected(text):
	with pytest.raises(ValueError, match="empty response"):
		load_json_object(text)


def test_non_object_rejected():
	with pytest.raises(ValueError, match="expected a JSON object, got list"):
		load_json_object("[1, 2]")


def test_garbage_rejected():
	with pytest.raises(ValueError):
		load_json_object("not-json")
