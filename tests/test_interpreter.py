from pathlib import Path
import tempfile
import unittest

from bfkit import (
    BrainfuckInterpreter,
    Config,
    ConfigurationError,
    InvalidCharacterError,
    Tape,
    TapeBoundsError,
    UnbalancedBracketsError,
    build_jump_table,
)
from bfkit.bf_interpreter import StepLimitExceeded, format_window
from bfkit.source import check_brackets, prepare, read_source, sanitize

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


class JumpTableTests(unittest.TestCase):
    def test_nested_brackets_match_both_ways(self) -> None:
        table = build_jump_table("[[]+]")
        self.assertEqual(table.closers, {0: 4, 1: 2})
        self.assertEqual(table.openers, {4: 0, 2: 1})
        self.assertEqual(table.match(1), 2)
        self.assertEqual(table.match(4), 0)
        self.assertEqual(len(table), 2)

    def test_stray_closer_is_an_internal_error(self) -> None:
        with self.assertRaises(RuntimeError):
            build_jump_table("][")


class SourceTests(unittest.TestCase):
    def test_sanitize_keeps_instructions_and_debug_symbols(self) -> None:
        self.assertEqual(sanitize("a+b-c [#] $ ok."), "+-[#]$.")

    def test_unbalanced_counts_rejected(self) -> None:
        with self.assertRaises(UnbalancedBracketsError):
            check_brackets("[[]")

    def test_closer_before_opener_rejected(self) -> None:
        with self.assertRaises(UnbalancedBracketsError):
            check_brackets("][")

    def test_verbose_keeps_unknown_characters(self) -> None:
        self.assertEqual(prepare("+x", verbose=True), "+x")
        self.assertEqual(prepare("+x"), "+")

    def test_read_source_checks_suffix_and_existence(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            wrong = Path(tmp) / "program.txt"
            wrong.write_text("+", encoding="utf-8")
            with self.assertRaises(ValueError):
                read_source(str(wrong))
            with self.assertRaises(FileNotFoundError):
                read_source(str(Path(tmp) / "missing.bf"))
            good = Path(tmp) / "program.bf"
            good.write_text("+.", encoding="utf-8")
            self.assertEqual(read_source(str(good)), "+.")


class ConfigTests(unittest.TestCase):
    def test_offset_must_address_a_cell(self) -> None:
        with self.assertRaises(ConfigurationError):
            Config(mem_size=10, offset=10).validate()
        self.assertEqual(Config(mem_size=10, offset=9).validate().offset, 9)

    def test_release_suppresses_debug_codegen(self) -> None:
        self.assertTrue(Config(debug=True).debug_codegen)
        self.assertFalse(Config(debug=True, release=True).debug_codegen)


class BrainfuckInterpreterTests(unittest.TestCase):
    def test_simple_output(self) -> None:
        self.assertEqual(BrainfuckInterpreter().run("+++."), "\x03")

    def test_multiplication_loop(self) -> None:
        self.assertEqual(BrainfuckInterpreter().run("++++++[>++++++++++<-]>."), "<")

    def test_hello_world(self) -> None:
        self.assertEqual(BrainfuckInterpreter().run(HELLO_WORLD), "Hello World!\n")

    def test_nested_loops(self) -> None:
        self.assertEqual(BrainfuckInterpreter().run("++[>++[>+++<-]<-]>>."), "\x0c")

    def test_loop_skipped_on_zero_cell(self) -> None:
        self.assertEqual(BrainfuckInterpreter().run("[.]+."), "\x01")

    def test_increment_wraps_to_zero(self) -> None:
        interpreter = BrainfuckInterpreter()
        tape = interpreter.new_tape()
        interpreter.execute("+" * 256, tape)
        self.assertEqual(tape.current, 0)

    def test_decrement_wraps_to_255(self) -> None:
        interpreter = BrainfuckInterpreter()
        tape = interpreter.new_tape()
        interpreter.execute("-", tape)
        self.assertEqual(tape.current, 255)

    def test_move_left_from_zero_fails(self) -> None:
        with self.assertRaises(TapeBoundsError):
            BrainfuckInterpreter().run("<")

    def test_failure_keeps_partial_output(self) -> None:
        interpreter = BrainfuckInterpreter()
        with self.assertRaises(TapeBoundsError):
            interpreter.run("+.<+.")
        self.assertEqual(interpreter.output, "\x01")

    def test_move_right_past_capacity_fails(self) -> None:
        interpreter = BrainfuckInterpreter(mem_size=3)
        tape = interpreter.new_tape()
        interpreter.execute(">>", tape)
        self.assertEqual(tape.pointer, 2)
        with self.assertRaises(TapeBoundsError):
            interpreter.execute(">", tape)
        self.assertEqual(tape.pointer, 2)

    def test_tape_grows_one_cell_at_a_time(self) -> None:
        interpreter = BrainfuckInterpreter(offset=2)
        tape = interpreter.new_tape()
        self.assertEqual(len(tape.cells), 3)
        self.assertEqual(tape.pointer, 2)
        interpreter.execute(">", tape)
        self.assertEqual(len(tape.cells), 4)
        interpreter.execute("<<<", tape)
        self.assertEqual(len(tape.cells), 4)

    def test_offset_allows_moving_left(self) -> None:
        interpreter = BrainfuckInterpreter(offset=5)
        self.assertEqual(interpreter.run("<<<<<+."), "\x01")
        with self.assertRaises(TapeBoundsError):
            interpreter.run("<<<<<<")

    def test_input_from_prepared_bytes(self) -> None:
        interpreter = BrainfuckInterpreter()
        self.assertEqual(interpreter.run(",.,.", input_data=[65]), "A\x00")

    def test_input_from_key_source(self) -> None:
        interpreter = BrainfuckInterpreter(read_key=lambda: 66)
        self.assertEqual(interpreter.run(",+."), "C")

    def test_unknown_character_rejected(self) -> None:
        with self.assertRaises(InvalidCharacterError) as ctx:
            BrainfuckInterpreter().run("+a")
        self.assertEqual(ctx.exception.char, "a")
        self.assertEqual(ctx.exception.position, 1)

    def test_debug_symbols_ignored_without_debug(self) -> None:
        self.assertEqual(BrainfuckInterpreter().run("+#$"), "")

    def test_cell_dump_counts_up(self) -> None:
        output = BrainfuckInterpreter(debug=True).run("+++#>#")
        self.assertEqual(
            output,
            "\ndebug flag 1 : \x03 3 0\n\ndebug flag 2 : \x00 0 1\n",
        )

    def test_window_dump_is_clamped(self) -> None:
        output = BrainfuckInterpreter(debug=True, mem_size=5).run(">>+$")
        self.assertEqual(output, "\nwindow 2 : 0:000 1:000 [2:001] 3:000 4:000\n")

    def test_step_limit_exceeded(self) -> None:
        with self.assertRaises(StepLimitExceeded):
            BrainfuckInterpreter().run("+[]", max_steps=10)

    def test_tape_carries_over_between_calls(self) -> None:
        interpreter = BrainfuckInterpreter()
        tape = interpreter.new_tape()
        interpreter.execute("+++>", tape)
        self.assertEqual(interpreter.execute("<.", tape), "\x03")

    def test_format_window_marks_pointer(self) -> None:
        tape = Tape(cells=[1, 2, 3], pointer=1)
        self.assertEqual(format_window(tape, mem_size=3), "window 1 : 0:001 [1:002] 2:003")


if __name__ == "__main__":
    unittest.main()
