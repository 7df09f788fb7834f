import pytest

from awskit.codegen.naming import (
    NameAllocator,
    attribute_name,
    class_name,
    client_class_name,
    constant_name,
    method_name,
    package_name,
    to_valid_python_name,
)


@pytest.mark.parametrize(
    "shape_name,expected",
    [
        ("AttributeValue", "AttributeValue"),
        ("Input", "Input_"),
        ("Request", "Request_"),
        ("Result", "Result_"),
        ("__string", "String"),
        ("__listOfJob", "ListOfJob"),
        ("tag", "Tag"),
        ("H264Settings", "H264Settings"),
        ("3DSettings", "I_3DSettings"),
        ("None", "None_"),
    ],
)
def test_class_name(shape_name, expected):
    assert class_name(shape_name) == expected


@pytest.mark.parametrize(
    "member_name,expected",
    [
        ("TableName", "table_name"),
        ("BOOL", "bool"),
        ("nextToken", "next_token"),
        ("Type", "type_"),
        ("Lambda", "lambda_"),
        ("Self", "self_"),
        ("Super", "super_"),
        ("3DMode", "i_3_d_mode"),
        ("x-amz-meta-", "x_amz_meta"),
    ],
)
def test_attribute_name(member_name, expected):
    assert attribute_name(member_name) == expected


def test_attribute_name_reserved():
    assert attribute_name("Region", ["region"]) == "region_"
    assert attribute_name("Region", ["region", "region_"]) == "region__"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("TOTAL", "TOTAL"),
        ("HEVC 444", "HEVC_444"),
        ("application/json", "APPLICATION_JSON"),
        ("1080p", "V_1080P"),
        ("", "EMPTY"),
        ("rate-based", "RATE_BASED"),
    ],
)
def test_constant_name(value, expected):
    assert constant_name(value) == expected


class TestNameAllocator:
    def test_unique_attributes(self):
        names = NameAllocator(["create"])
        assert names.attribute("Create") == "create_"
        assert names.attribute("TableName") == "table_name"
        assert names.attribute("tableName") == "table_name_"

    def test_unique_constants(self):
        names = NameAllocator()
        assert names.constant("a-b") == "A_B"
        assert names.constant("a b") == "A_B_"


@pytest.mark.parametrize(
    "service_id,expected",
    [
        ("DynamoDB", "DynamoDbClient"),
        ("MediaConvert", "MediaConvertClient"),
        ("Kinesis", "KinesisClient"),
        ("CloudWatch Logs", "CloudWatchLogsClient"),
        ("SSM", "SsmClient"),
    ],
)
def test_client_class_name(service_id, expected):
    assert client_class_name(service_id) == expected


def test_method_name():
    assert method_name("BatchGetItem") == "batch_get_item"
    assert method_name("ListTables") == "list_tables"
    assert method_name("Close") == "close_"


def test_package_name():
    assert package_name("dynamodb") == "dynamodb"
    assert package_name("lambda") == "lambda_"
    assert package_name("cognito-idp") == "cognito_idp"


def test_to_valid_python_name():
    assert to_valid_python_name("x-amz-meta-") == "x_amz_meta_"
    assert to_valid_python_name("class") == "class_"
    assert to_valid_python_name("1st") == "i_1st"
