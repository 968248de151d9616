"""Tests for providers.common.case module."""

from __future__ import annotations

import io

import pytest

from messaging_apis.providers.common import FileUpload
from messaging_apis.providers.common.case import (
    CaseStyle,
    camelcase,
    camelcase_keys,
    camelcase_keys_deep,
    pascalcase,
    pascalcase_keys_deep,
    snakecase,
    snakecase_keys,
    snakecase_keys_deep,
    transcode,
)


class TestKeyConversion:
    """Tests for single key conversion."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("myKey", "my_key"),
            ("has2fa", "has_2fa"),
            ("image1024", "image_1024"),
            ("chatId", "chat_id"),
            ("my_key", "my_key"),
            ("_private", "_private"),
        ],
    )
    def test_snakecase(self, key: str, expected: str) -> None:
        """Test camelCase keys become snake_case, snake keys stay put."""
        assert snakecase(key) == expected

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("my_key", "myKey"),
            ("has_2fa", "has2fa"),
            ("image_1024", "image1024"),
            ("myKey", "myKey"),
            ("ID", "ID"),
        ],
    )
    def test_camelcase(self, key: str, expected: str) -> None:
        """Test snake_case keys become camelCase, camel keys stay put."""
        assert camelcase(key) == expected

    def test_pascalcase(self) -> None:
        """Test PascalCase from either convention."""
        assert pascalcase("my_key") == "MyKey"
        assert pascalcase("myKey") == "MyKey"
        assert pascalcase("BgColor") == "BgColor"

    def test_consecutive_capitals_do_not_round_trip(self) -> None:
        """Test the documented acronym limitation is kept as-is."""
        assert snakecase("userID") == "user_id"
        assert camelcase(snakecase("userID")) == "userId"

    @pytest.mark.parametrize(
        "key", ["previewImageUrl", "notificationDisabled", "chatId", "has2fa", "isBot", "text"]
    )
    def test_camel_keys_round_trip(self, key: str) -> None:
        assert camelcase(snakecase(key)) == key

    @pytest.mark.parametrize(
        "key",
        ["preview_image_url", "notification_disabled", "image_1024", "_private_key", "text"],
    )
    def test_snake_keys_round_trip(self, key: str) -> None:
        assert snakecase(camelcase(key)) == key


class TestTranscode:
    """Tests for recursive key rewriting."""

    def test_deep_conversion(self) -> None:
        """Test nested mappings inside lists are converted."""
        value = {"chatId": 1, "replyMarkup": {"inlineKeyboard": [[{"callbackData": "x"}]]}}

        result = snakecase_keys_deep(value)

        assert result == {
            "chat_id": 1,
            "reply_markup": {"inline_keyboard": [[{"callback_data": "x"}]]},
        }

    def test_shallow_conversion(self) -> None:
        """Test shallow helpers only touch the outermost keys."""
        value = {"chatId": 1, "replyMarkup": {"inlineKeyboard": []}}

        assert snakecase_keys(value) == {"chat_id": 1, "reply_markup": {"inlineKeyboard": []}}
        assert camelcase_keys({"a_b": {"c_d": 1}}) == {"aB": {"c_d": 1}}

    def test_input_is_not_mutated(self) -> None:
        """Test a new structure is returned and the input is untouched."""
        value = {"outerKey": {"innerKey": [1, {"deepKey": 2}]}}
        snapshot = {"outerKey": {"innerKey": [1, {"deepKey": 2}]}}

        result = snakecase_keys_deep(value)

        assert value == snapshot
        assert result is not value
        assert result["outer_key"] is not value["outerKey"]

    def test_string_values_are_untouched(self) -> None:
        """Test only keys change, never string values."""
        assert camelcase_keys_deep({"text": "snake_case_value"}) == {"text": "snake_case_value"}

    def test_key_order_is_preserved(self) -> None:
        """Test the converted mapping keeps insertion order."""
        result = snakecase_keys_deep({"zKey": 1, "aKey": 2, "mKey": 3})

        assert list(result) == ["z_key", "a_key", "m_key"]

    def test_tuples_become_lists(self) -> None:
        """Test tuples are returned as lists with element order kept."""
        assert transcode(({"aB": 1}, 2), CaseStyle.SNAKE) == [{"a_b": 1}, 2]

    @pytest.mark.parametrize(
        "value",
        [None, True, 3, 2.5, "text", b"\x89PNG", bytearray(b"\x00")],
    )
    def test_scalars_and_bytes_pass_through(self, value) -> None:
        """Test scalars and binary buffers come back unchanged."""
        assert transcode(value, CaseStyle.CAMEL) == value

    def test_opaque_objects_pass_through(self) -> None:
        """Test streams and uploads are returned as the same object."""
        stream = io.BytesIO(b"data")
        upload = FileUpload(b"data", filename="a.bin")

        result = transcode({"fileData": stream, "mediaUpload": upload}, CaseStyle.SNAKE)

        assert result["file_data"] is stream
        assert result["media_upload"] is upload

    def test_excluded_keys_keep_spelling_and_subtree(self) -> None:
        """Test excluded keys are neither renamed nor descended into."""
        value = {"someKey": 1, "metadata": {"userDefinedKey": {"nestedKey": 2}}}

        result = snakecase_keys_deep(value, exclude=("metadata",))

        assert result == {"some_key": 1, "metadata": {"userDefinedKey": {"nestedKey": 2}}}

    def test_excluded_subtree_is_copied(self) -> None:
        """Test changing an excluded subtree in the result leaves the input alone."""
        value = {"metadata": {"Weird_Key": [1]}, "user_id": 2}

        result = transcode(value, CaseStyle.CAMEL, exclude=("metadata",))
        result["metadata"]["Weird_Key"].append(99)
        result["metadata"]["Other"] = 3

        assert value == {"metadata": {"Weird_Key": [1]}, "user_id": 2}
        assert result["userId"] == 2

    def test_shallow_subtrees_are_copied(self) -> None:
        value = {"outerKey": {"innerKey": 1}}

        result = snakecase_keys(value)
        result["outer_key"]["innerKey"] = 2

        assert value == {"outerKey": {"innerKey": 1}}

    def test_non_string_keys_are_kept(self) -> None:
        """Test integer keys are left as they are."""
        assert camelcase_keys_deep({1: {"a_b": 2}}) == {1: {"aB": 2}}

    def test_direction_accepts_string_value(self) -> None:
        """Test the direction may be given as the enum's string value."""
        assert transcode({"a_b": 1}, "camel") == {"aB": 1}

    def test_pascal_conversion(self) -> None:
        """Test deep PascalCase conversion used for keyboard payloads."""
        keyboard = {"type": "keyboard", "buttons": [{"action_type": "reply", "bgColor": "#fff"}]}

        assert pascalcase_keys_deep(keyboard) == {
            "Type": "keyboard",
            "Buttons": [{"ActionType": "reply", "BgColor": "#fff"}],
        }
