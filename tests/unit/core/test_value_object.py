from typing import Any, Dict, Optional

import pytest

from awskit.core import Input, InvalidArgument, Request, ValueObject
from awskit.core.input import REGION_KEY


class Tag(ValueObject):
    _member_names = {
        "Key": "key",
        "Value": "value",
    }

    def __init__(self, *, key: Optional[str] = None, value: Optional[str] = None):
        self._key = key
        self._value = value

    @property
    def key(self) -> Optional[str]:
        return self._key

    @property
    def value(self) -> Optional[str]:
        return self._value


class TagResourceInput(Input):
    _member_names = {
        "ResourceArn": "resource_arn",
        "Tags": "tags",
    }

    def __init__(self, *, resource_arn: Optional[str] = None, tags=None, region: Optional[str] = None):
        super().__init__(region)
        self.resource_arn = resource_arn
        self.tags = None if tags is None else [Tag.create(v0) for v0 in tags]

    def request(self) -> Request:
        return Request("POST", "/", {}, {}, "")

    def request_body(self) -> Dict[str, Any]:
        return {"ResourceArn": self.resource_arn}


class TestValueObject:
    def test_create_from_dict(self):
        tag = Tag.create({"Key": "env", "Value": "prod"})
        assert tag.key == "env"
        assert tag.value == "prod"

    def test_create_accepts_python_names(self):
        assert Tag.create({"key": "env"}) == Tag(key="env")

    def test_create_returns_instances_unchanged(self):
        tag = Tag(key="env")
        assert Tag.create(tag) is tag

    def test_create_unknown_member(self):
        with pytest.raises(InvalidArgument) as e:
            Tag.create({"Key": "env", "Colour": "blue"})
        assert str(e.value) == 'Unknown parameter "Colour" for "Tag".'

    def test_create_from_other_types(self):
        with pytest.raises(InvalidArgument):
            Tag.create(["env", "prod"])

    def test_equality_and_repr(self):
        assert Tag(key="a", value="b") == Tag(key="a", value="b")
        assert Tag(key="a") != Tag(key="b")
        assert repr(Tag(key="a")) == "Tag(key='a')"


class TestInput:
    def test_create_from_dict(self):
        input = TagResourceInput.create({"ResourceArn": "arn", "Tags": [{"Key": "env", "Value": "prod"}]})
        assert input.resource_arn == "arn"
        assert input.tags == [Tag(key="env", value="prod")]
        assert input.region is None

    def test_create_with_region(self):
        input = TagResourceInput.create({"ResourceArn": "arn", REGION_KEY: "eu-central-1"})
        assert input.region == "eu-central-1"

    def test_create_from_none(self):
        assert TagResourceInput.create(None) == TagResourceInput()

    def test_create_returns_instances_unchanged(self):
        input = TagResourceInput(resource_arn="arn")
        assert TagResourceInput.create(input) is input

    def test_create_unknown_member(self):
        with pytest.raises(InvalidArgument):
            TagResourceInput.create({"ResourceARN": "arn"})

    def test_create_from_other_types(self):
        with pytest.raises(InvalidArgument):
            TagResourceInput.create("arn")

    def test_base_request_body(self):
        assert Input().request_body() == {}
        with pytest.raises(NotImplementedError):
            Input().request()
