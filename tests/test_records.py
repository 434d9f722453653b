import pytest

from packerconfig import Builder, DataValidationError, PostProcessor, Provisioner, TypedRecord


def test_record_type_is_fixed_at_construction() -> None:
    record = TypedRecord("shell")
    assert record.type == "shell"
    assert record.get("type") == "shell"
    assert "type" in record

    with pytest.raises(DataValidationError):
        record.set("type", "file")
    with pytest.raises(AttributeError):
        record.type = "file"  # type: ignore[misc]


def test_record_requires_non_empty_type() -> None:
    with pytest.raises(DataValidationError):
        TypedRecord("")


def test_set_overwrites_and_get_never_raises() -> None:
    record = TypedRecord("shell")
    record.set("inline", ["echo one"])
    record.set("inline", ["echo two"])
    assert record.get("inline") == ["echo two"]
    assert record.get("missing") is None
    assert record.get("missing", "fallback") == "fallback"


def test_set_does_not_coerce_values() -> None:
    record = TypedRecord("qemu").set("disk_size", "40960").set("headless", 1)
    assert record.fields == {"disk_size": "40960", "headless": 1}


def test_unset_removes_key_silently() -> None:
    record = TypedRecord("qemu").set("headless", True)
    record.unset("headless").unset("never_set")
    assert record.fields == {}


def test_as_document_puts_type_first_and_is_detached() -> None:
    record = TypedRecord("docker").set("image", "ubuntu").set("changes", ["EXPOSE 80"])
    document = record.as_document()
    assert list(document) == ["type", "image", "changes"]

    changes = document["changes"]
    assert isinstance(changes, list)
    changes.append("EXPOSE 443")
    assert record.get("changes") == ["EXPOSE 80"]


def test_typed_setters_coerce_to_json_types() -> None:
    record = TypedRecord("virtualbox-iso")
    record.set_string("guest_os_type", "Ubuntu_64")
    record.set_string("ssh_port", 22)
    record.set_integer("disk_size", "40960")
    record.set_boolean("headless", True)
    record.set_string_list("boot_command", ("<esc>", 1))
    record.set_mapping("vboxmanage_props", {"memory": "2048"})
    assert record.fields == {
        "guest_os_type": "Ubuntu_64",
        "ssh_port": "22",
        "disk_size": 40960,
        "headless": True,
        "boot_command": ["<esc>", "1"],
        "vboxmanage_props": {"memory": "2048"},
    }


@pytest.mark.parametrize(
    ("setter", "value"),
    [
        ("set_string", None),
        ("set_string", ["a"]),
        ("set_integer", True),
        ("set_integer", "forty"),
        ("set_boolean", "yes"),
        ("set_string_list", "not-a-list"),
        ("set_string_list", [["nested"]]),
        ("set_mapping", ["a", "b"]),
        ("set_mapping", {1: "a"}),
    ],
)
def test_typed_setters_reject_unrepresentable_values(setter: str, value: object) -> None:
    record = TypedRecord("null")
    with pytest.raises(DataValidationError) as excinfo:
        getattr(record, setter)("key", value)
    assert excinfo.value.context["key"] == "key"
    assert record.fields == {}


def test_builder_name() -> None:
    builder = Builder("amazon-ebs").name("east")
    assert builder.as_document() == {"type": "amazon-ebs", "name": "east"}
    assert builder.category == "builder"


def test_provisioner_targeting_and_overrides() -> None:
    provisioner = Provisioner("shell")
    provisioner.only("east", "west").pause_before("10s")
    provisioner.override("east", {"execute_command": "sudo {{ .Path }}"})
    provisioner.override("west", {"inline": ["echo west"]})
    assert provisioner.as_document() == {
        "type": "shell",
        "only": ["east", "west"],
        "pause_before": "10s",
        "override": {
            "east": {"execute_command": "sudo {{ .Path }}"},
            "west": {"inline": ["echo west"]},
        },
    }


def test_post_processor_options() -> None:
    post_processor = PostProcessor("vagrant").except_("docker").keep_input_artifact()
    assert post_processor.as_document() == {
        "type": "vagrant",
        "except": ["docker"],
        "keep_input_artifact": True,
    }
    assert post_processor.category == "post-processor"


@pytest.mark.parametrize(
    "value",
    [
        float("nan"),
        float("inf"),
        {"a", "b"},
        ("a", "b"),
        b"bytes",
        ["ok", float("-inf")],
        {"nested": {1: "a"}},
        {"nested": [{"disks"}]},
    ],
)
def test_set_rejects_values_without_a_json_form(value: object) -> None:
    record = TypedRecord("qemu")
    with pytest.raises(DataValidationError) as excinfo:
        record.set("key", value)  # type: ignore[arg-type]
    assert excinfo.value.context["key"] == "key"
    assert record.fields == {}


def test_set_accepts_nested_json_values() -> None:
    value = {"disks": [{"size": 10.5, "ssd": True, "label": None}], "count": 2}
    record = TypedRecord("qemu").set("layout", value)
    assert record.get("layout") == value


def test_string_setters_render_booleans_in_lowercase() -> None:
    record = TypedRecord("shell")
    record.set_string("skip_clean", True)
    record.set_string_list("flags", [False, "x"])
    assert record.fields == {"skip_clean": "true", "flags": ["false", "x"]}


def test_override_rejects_values_without_a_json_form() -> None:
    provisioner = Provisioner("shell")
    with pytest.raises(DataValidationError):
        provisioner.override("east", {"inline": {"echo"}})  # type: ignore[dict-item]
    assert provisioner.fields == {}
