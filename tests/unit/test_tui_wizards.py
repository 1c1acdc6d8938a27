"""Unit tests for the data-entry wizards — no Textual dependency.

File: tests/unit/test_tui_wizards.py

Tests:
- Field editing and focus cycling (Tab wraps, Shift+Tab wraps backwards)
- Project wizard validation, selectors and command construction
- Module wizard defaults and validation
- Dependency wizard list/custom modes and snippet rendering
"""

from __future__ import annotations

import pytest

from mvn_tui.maven.java_version import JavaVersion
from mvn_tui.ui.tui.state import FinalizeProject, RegisterModule
from mvn_tui.ui.tui.wizards import (
    COMMON_DEPENDENCIES,
    Dependency,
    DependencyWizard,
    FieldWizard,
    ModuleWizard,
    ProjectWizard,
    TextField,
    dependency_snippet,
)

_JAVA = (
    JavaVersion(version="21", full_version="21.0.1", vendor="OpenJDK"),
    JavaVersion(version="17", full_version="17.0.8", vendor="OpenJDK", is_default=True),
    JavaVersion(version="8", full_version="1.8.0_392", vendor="Oracle"),
)


def _type(wizard: FieldWizard, text: str) -> None:
    for character in text:
        wizard.handle_key("space" if character == " " else character, character)


def _fill(wizard: FieldWizard, *values: str) -> None:
    wizard.focus = 0
    for value in values:
        _type(wizard, value)
        wizard.handle_key("tab")
    wizard.focus = 0


@pytest.mark.unit
class TestTextField:
    def test_text_is_trimmed_and_placeholder_resolves(self) -> None:
        field = TextField("Name", placeholder="default")
        assert field.resolved == "default"
        field.value = "  value  "
        assert field.text == "value"
        assert field.resolved == "value"

    def test_insert_respects_max_length(self) -> None:
        field = TextField("Version", max_length=3)
        for character in "12345":
            field.insert(character)
        assert field.value == "123"

    def test_backspace_on_empty_is_noop(self) -> None:
        field = TextField("Name")
        field.backspace()
        assert field.value == ""


@pytest.mark.unit
class TestFocusCycling:
    def test_tab_wraps_including_java_row(self) -> None:
        wizard = ProjectWizard(_JAVA)
        assert wizard.slot_count == 6
        for _ in range(5):
            wizard.handle_key("tab")
        assert wizard.java_selector_focused is True
        assert wizard.focused_field is None
        wizard.handle_key("tab")
        assert wizard.focus == 0

    def test_shift_tab_wraps_backwards(self) -> None:
        wizard = ModuleWizard()
        wizard.handle_key("shift+tab")
        assert wizard.focus == 3
        wizard.handle_key("up")
        assert wizard.focus == 2
        wizard.handle_key("down")
        assert wizard.focus == 3

    def test_typing_goes_to_focused_field(self) -> None:
        wizard = ModuleWizard()
        wizard.handle_key("tab")
        _type(wizard, "org.acme")
        wizard.handle_key("backspace")
        assert wizard.fields[0].value == ""
        assert wizard.fields[1].value == "org.acm"

    def test_non_printable_keys_are_ignored(self) -> None:
        wizard = ModuleWizard()
        assert wizard.handle_key("f5", None) is False
        assert wizard.fields[0].value == ""


@pytest.mark.unit
class TestProjectWizard:
    def test_empty_and_whitespace_fields_are_required(self) -> None:
        wizard = ProjectWizard(_JAVA)
        _fill(wizard, "   ", "", " ", "", "  ")
        assert wizard.validation_errors() == [
            "Folder Name is required",
            "Organization is required",
            "Project ID is required",
            "Version is required",
            "Base Package is required",
        ]

    def test_errors_visible_only_after_submit(self) -> None:
        wizard = ProjectWizard(_JAVA)
        assert wizard.visible_errors == []
        wizard.submitted = True
        assert "Folder Name is required" in wizard.visible_errors

    def test_project_id_rejects_spaces_and_leading_digit(self) -> None:
        wizard = ProjectWizard(_JAVA)
        _fill(wizard, "My App", "com.acme", "my app", "1.0", "com.acme")
        assert wizard.validation_errors() == [
            "Project ID cannot contain spaces (use hyphens or underscores instead)"
        ]

        wizard.fields[2].value = "1app"
        assert wizard.validation_errors() == [
            "Project ID must start with a letter and contain only letters, digits, "
            "hyphens, underscores, and periods"
        ]

    def test_invalid_group_and_package(self) -> None:
        wizard = ProjectWizard(_JAVA)
        _fill(wizard, "app", "9com", "app", "1.0", "com acme")
        errors = wizard.validation_errors()
        assert errors[0].startswith("Organization must start with a letter")
        assert errors[1] == "Base Package must be a valid Java package name (e.g., com.example)"

    def test_valid_input_trims_and_builds_command(self) -> None:
        wizard = ProjectWizard(_JAVA)
        _fill(wizard, " My Demo ", " com.acme ", " demo ", "2.0", "com.acme.demo")
        assert wizard.validation_errors() == []

        command = wizard.build_command("mvn")
        assert str(command) == "mvn archetype:generate -DgroupId=com.acme -DartifactId=demo"
        assert command.args == (
            "archetype:generate",
            "-DinteractiveMode=false",
            "-DgroupId=com.acme",
            "-DartifactId=demo",
            "-Dversion=2.0",
            "-Dpackage=com.acme.demo",
            "-DarchetypeGroupId=org.apache.maven.archetypes",
            "-DarchetypeArtifactId=maven-archetype-quickstart",
            "-DarchetypeVersion=1.4",
            "-Dmaven.compiler.source=1.8",
            "-Dmaven.compiler.target=1.8",
        )
        assert wizard.side_effect() == FinalizeProject(
            artifact_id="demo", folder_name="My Demo", java_version="17"
        )

    def test_java_selector_starts_on_default_and_cycles(self) -> None:
        wizard = ProjectWizard(_JAVA)
        assert wizard.java_version == _JAVA[1]
        wizard.focus = len(wizard.fields)
        wizard.handle_key("right")
        assert wizard.java_version == _JAVA[2]
        wizard.handle_key("right")
        assert wizard.java_version == _JAVA[0]
        assert wizard.archetype_index == 0

    def test_left_right_elsewhere_cycles_archetype(self) -> None:
        wizard = ProjectWizard(_JAVA)
        wizard.handle_key("left")
        assert wizard.archetype.name == "Web Application"
        wizard.handle_key("right")
        wizard.handle_key("right")
        assert wizard.archetype.name == "Spring Boot App"
        assert wizard.java_version == _JAVA[1]

    def test_no_java_versions(self) -> None:
        wizard = ProjectWizard(())
        assert wizard.java_version is None
        _fill(wizard, "app", "com.acme", "app", "1.0", "com.acme")
        assert wizard.side_effect().java_version is None


@pytest.mark.unit
class TestModuleWizard:
    def test_only_module_name_is_required(self) -> None:
        wizard = ModuleWizard()
        assert wizard.validation_errors() == ["Module Name is required"]

    def test_optional_fields_fall_back(self) -> None:
        wizard = ModuleWizard()
        _fill(wizard, "  core  ")
        assert wizard.validation_errors() == []
        command = wizard.build_command("./mvnw")
        assert str(command) == "./mvnw archetype:generate -DgroupId=com.example -DartifactId=core"
        assert "-Dversion=1.0-SNAPSHOT" in command.args
        assert "-Dpackage=com.example" in command.args
        assert wizard.side_effect() == RegisterModule(module_name="core")

    def test_module_id_overrides_artifact(self) -> None:
        wizard = ModuleWizard()
        _fill(wizard, "core", "org.acme", "acme-core", "3.1")
        command = wizard.build_command()
        assert "-DartifactId=acme-core" in command.args
        assert "-Dversion=3.1" in command.args
        assert "-Dpackage=org.acme" in command.args

    def test_module_name_with_space_or_digit_is_rejected(self) -> None:
        wizard = ModuleWizard()
        _fill(wizard, "my module")
        assert wizard.validation_errors() == [
            "Module Name cannot contain spaces (use hyphens or underscores instead)"
        ]
        wizard.fields[0].value = "2core"
        assert wizard.validation_errors()[0].startswith("Module Name must start with a letter")


@pytest.mark.unit
class TestDependencyWizard:
    def test_cursor_is_clamped(self) -> None:
        wizard = DependencyWizard()
        wizard.handle_key("up")
        assert wizard.cursor == 0
        for _ in range(len(COMMON_DEPENDENCIES) + 3):
            wizard.handle_key("down")
        assert wizard.cursor == len(COMMON_DEPENDENCIES) - 1
        assert wizard.selected.is_custom is True
        assert wizard.chosen_dependency() is None

    def test_list_mode_ignores_typing(self) -> None:
        wizard = DependencyWizard()
        assert wizard.handle_key("a", "a") is False
        assert all(field.value == "" for field in wizard.fields)

    def test_curated_choice(self) -> None:
        wizard = DependencyWizard()
        assert wizard.chosen_dependency() == Dependency(
            "org.junit.jupiter", "junit-jupiter", "5.10.1", "test"
        )

    def test_custom_mode_uses_placeholders_for_empty_coordinates(self) -> None:
        wizard = DependencyWizard()
        wizard.enter_custom_mode()
        wizard.handle_key("tab")
        wizard.handle_key("tab")
        _type(wizard, "2.1")
        assert wizard.chosen_dependency() == Dependency("org.example", "my-library", "2.1", "")

        wizard.leave_custom_mode()
        assert wizard.custom_mode is False
        assert wizard.fields[2].value == "2.1"


@pytest.mark.unit
class TestDependencySnippet:
    def test_full_snippet(self) -> None:
        lines = dependency_snippet(Dependency("org.slf4j", "slf4j-api", "2.0.9", "runtime"))
        assert lines == [
            "Add this dependency to your pom.xml:",
            "",
            "    <dependency>",
            "      <groupId>org.slf4j</groupId>",
            "      <artifactId>slf4j-api</artifactId>",
            "      <version>2.0.9</version>",
            "      <scope>runtime</scope>",
            "    </dependency>",
            "",
            "Copy the above XML and add it to the <dependencies> section of your pom.xml",
            "",
            "Dependency details:",
            "  GroupID: org.slf4j",
            "  ArtifactID: slf4j-api",
            "  Version: 2.0.9",
            "  Scope: runtime",
        ]

    def test_version_and_scope_are_omitted_when_empty(self) -> None:
        lines = dependency_snippet(
            Dependency("org.springframework.boot", "spring-boot-starter-web")
        )
        assert not any("<version>" in line or "<scope>" in line for line in lines)
        assert not any(line.startswith(("  Version:", "  Scope:")) for line in lines)
