"""Tests for CLI interface."""

import json
import os

from click.testing import CliRunner

from wiregen.generator.cli import cli

FILE_DIR = os.path.dirname(os.path.realpath(__file__))
GREETER = f"{FILE_DIR}/greeter.toml"
EVERYTHING = f"{FILE_DIR}/../proto/everything.toml"


def describe_gen_command():
    def generates_a_module(expect, tmp_path):
        output_file = tmp_path / "greeter.py"
        result = CliRunner().invoke(cli, ["gen", "-i", GREETER, "-o", str(output_file)])
        expect(result.exit_code) == 0
        content = output_file.read_text()
        expect("class Greeter(Interface, Generic[T]):" in content) == True
        expect("from wiregen.proto import (" in content) == True
        expect(os.listdir(tmp_path)) == ["greeter.py"]

    def generates_a_package_from_several_inputs(expect, tmp_path):
        output_dir = tmp_path / "proto"
        result = CliRunner().invoke(
            cli, ["gen", "-i", GREETER, "-i", EVERYTHING, "-o", str(output_dir)]
        )
        expect(result.exit_code) == 0
        expect(sorted(os.listdir(output_dir))) == ["__init__.py", "everything.py", "greeter.py"]
        init = (output_dir / "__init__.py").read_text()
        expect("from .greeter import *" in init) == True
        expect("from .everything import *" in init) == True

    def honours_runtime_import(expect, tmp_path):
        output_file = tmp_path / "greeter.py"
        result = CliRunner().invoke(
            cli,
            ["gen", "-i", GREETER, "-o", str(output_file), "--runtime-import", "server.wire"],
        )
        expect(result.exit_code) == 0
        expect("from server.wire import (" in output_file.read_text()) == True

    def fails_with_missing_input(expect, tmp_path):
        output_file = tmp_path / "out.py"
        result = CliRunner().invoke(
            cli, ["gen", "-i", "/nonexistent/file.toml", "-o", str(output_file)]
        )
        expect(result.exit_code) == 1
        expect("cannot read" in result.output) == True
        expect(output_file.exists()) == False

    def writes_nothing_when_any_input_fails(expect, tmp_path):
        broken = tmp_path / "broken.toml"
        broken.write_text("name = ")
        output_dir = tmp_path / "out"
        result = CliRunner().invoke(
            cli, ["gen", "-i", GREETER, "-i", str(broken), "-o", str(output_dir)]
        )
        expect(result.exit_code) == 1
        expect("invalid TOML" in result.output) == True
        expect(output_dir.exists()) == False

    def rejects_several_inputs_for_one_file(expect, tmp_path):
        output_file = tmp_path / "out.py"
        result = CliRunner().invoke(
            cli, ["gen", "-i", GREETER, "-i", EVERYTHING, "-o", str(output_file)]
        )
        expect(result.exit_code) == 1
        expect(output_file.exists()) == False

    def rejects_inputs_with_the_same_protocol_name(expect, tmp_path):
        first = tmp_path / "a.toml"
        first.write_text('name = "same"\n[[interface]]\nname = "alpha"\nversion = 1\n')
        second = tmp_path / "b.toml"
        second.write_text('name = "same"\n[[interface]]\nname = "beta"\nversion = 1\n')
        output_file = tmp_path / "out.py"
        result = CliRunner().invoke(
            cli, ["gen", "-i", str(first), "-i", str(second), "-o", str(output_file)]
        )
        expect(result.exit_code) == 1
        expect("protocol same is already generated" in result.output) == True
        expect(output_file.exists()) == False

    def applies_strict_validation(expect, tmp_path):
        schema = tmp_path / "dup.toml"
        schema.write_text(
            'name = "dup"\n[[interface]]\nname = "a"\nversion = 1\n'
            '[[interface]]\nname = "a"\nversion = 1\n'
        )
        output_file = tmp_path / "dup.py"
        permissive = CliRunner().invoke(cli, ["gen", "-i", str(schema), "-o", str(output_file)])
        expect(permissive.exit_code) == 0
        strict = CliRunner().invoke(
            cli, ["gen", "--strict", "-i", str(schema), "-o", str(tmp_path / "strict.py")]
        )
        expect(strict.exit_code) == 1
        expect("duplicate interface a" in strict.output) == True

    def requires_all_options(expect):
        result = CliRunner().invoke(cli, ["gen", "-i", GREETER])
        expect(result.exit_code) != 0
        expect("Missing option" in result.output) == True


def describe_check_command():
    def accepts_an_unchanged_protocol(expect):
        result = CliRunner().invoke(cli, ["check", "-i", GREETER, "--baseline", GREETER])
        expect(result.exit_code) == 0
        expect("wire compatible" in result.output) == True

    def rejects_a_reordered_protocol(expect, tmp_path):
        with open(GREETER, encoding="utf-8") as f:
            text = f.read()
        newer = tmp_path / "greeter.toml"
        newer.write_text(
            text.replace('name = "hello"', 'name = "wave"\n\n[[interface.request]]\nname = "hello"')
        )
        result = CliRunner().invoke(cli, ["check", "-i", str(newer), "--baseline", GREETER])
        expect(result.exit_code) == 1
        expect("moved from hello to wave" in result.output) == True


def describe_info_command():
    def prints_opcode_tables(expect):
        result = CliRunner().invoke(cli, ["info", "-i", EVERYTHING])
        expect(result.exit_code) == 0
        expect("everything" in result.output) == True
        expect("bystander" in result.output) == True
        expect("destroy (destructor)" in result.output) == True

    def prints_json(expect):
        result = CliRunner().invoke(cli, ["info", "-i", EVERYTHING, "--json"])
        expect(result.exit_code) == 0
        data = json.loads(result.output)
        everything = data["interfaces"]["everything"]
        expect(everything["class"]) == "Everything"
        expect(everything["version"]) == 3
        expect([(r["name"], r["opcode"]) for r in everything["requests"]]) == [
            ("take", 0),
            ("destroy", 1),
        ]
        expect(everything["requests"][1]["destructor"]) == True
        expect([e["name"] for e in everything["events"]]) == ["give", "done"]
        expect(everything["enums"]) == ["Transform"]


def describe_main_group():
    def shows_help(expect):
        result = CliRunner().invoke(cli, ["--help"])
        expect(result.exit_code) == 0
        expect("gen" in result.output) == True
        expect("info" in result.output) == True
        expect("check" in result.output) == True

    def logs_progress_when_verbose(expect, tmp_path):
        result = CliRunner().invoke(
            cli, ["--verbose", "gen", "-i", GREETER, "-o", str(tmp_path / "greeter.py")]
        )
        expect(result.exit_code) == 0
        expect("greeter" in result.output) == True
