from fsconsole.api.suggestions import MAX_SUGGESTIONS, suggest


def test_fdisk_space_hints():
    hints = suggest("fdisk -size=99999 -path=/a.mia -name=P", "No hay espacio suficiente en el disco")
    assert hints[0] == "Check the free space of the disk"
    assert len(hints) == 3


def test_mount_not_found_uses_partition_name_from_message():
    hints = suggest("mount -path=/a.mia -name=X", "partition not found: 'Data 1'")
    assert hints[0] == "Check the exact partition name"
    assert '-name="Data 1"' in hints[1]


def test_rule_is_scoped_to_command():
    assert suggest("mkdisk -size=1 -path=/a", "already mounted") == []


def test_generic_rules_apply_to_any_command():
    hints = suggest("cat -filen=/x", "open /x: no such file or directory")
    assert "Check that the path is absolute" in hints


def test_hints_are_capped():
    hints = suggest(
        "mkdisk -size=1 -path=/a",
        "file exists; permission denied; no such file",
        extra=["extra hint"],
    )
    assert len(hints) == MAX_SUGGESTIONS
    assert "extra hint" not in hints


def test_no_match_returns_extra_only():
    assert suggest("", "", extra=["retry"]) == ["retry"]
