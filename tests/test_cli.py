import contextlib
import io
import os
import threading
import time
import unittest

from liars_dice.core.actions import Challenge, RaiseBid
from liars_dice.core.config import GameConfig
from UI.cli import HumanInput, build_parser, parse_action, play


def wait_until(condition, limit=2.0):
    deadline = time.monotonic() + limit
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.01)


class TestCli(unittest.TestCase):
    def test_parse_action(self):
        self.assertEqual(parse_action("c"), Challenge())
        self.assertEqual(parse_action("Challenge"), Challenge())
        self.assertEqual(parse_action("b 3 4"), RaiseBid(3, 4))
        self.assertEqual(parse_action("3 4"), RaiseBid(3, 4))
        self.assertIsNone(parse_action(""))
        self.assertIsNone(parse_action("b three 4"))
        self.assertIsNone(parse_action("b 3"))

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        self.assertEqual(args.players, 2)
        self.assertEqual(args.ai, "balanced")
        self.assertFalse(args.wild)

    def test_ai_only_game_runs_to_the_end(self):
        cfg = GameConfig(num_players=2, ai_difficulties=("novice", "adaptive"), rng_seed=5)
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            winner = play(cfg)
        self.assertIn(winner, (0, 1))
        self.assertIn("wins the game", out.getvalue())


class TestHumanInput(unittest.TestCase):
    """
    Tests for `HumanInput`: answers typed after a timeout must not leak into the next prompt.
    """

    def piped_input(self):
        read_fd, write_fd = os.pipe()
        reader, writer = os.fdopen(read_fd, "r"), os.fdopen(write_fd, "w")
        human = HumanInput(stream=reader)
        # cleanups run last-in first-out: writer, pump thread, reader
        self.addCleanup(reader.close)
        self.addCleanup(human._thread.join, 2.0)
        self.addCleanup(writer.close)
        return human, writer

    def test_late_answer_is_not_applied_to_the_next_prompt(self):
        human, writer = self.piped_input()
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertIsNone(human.read("Player 0> ", timeout=0.1))
            writer.write("b 9 6\n")
            writer.flush()
            wait_until(lambda: human._lines.qsize() > 0)
            self.assertIsNone(human.read("Player 1> ", timeout=0.1))

    def test_answer_typed_while_prompt_is_open_is_kept(self):
        human, writer = self.piped_input()

        def answer():
            writer.write("c\n")
            writer.flush()

        with contextlib.redirect_stdout(io.StringIO()):
            self.assertIsNone(human.read("Player 0> ", timeout=0.1))
            typist = threading.Timer(0.2, answer)
            typist.start()
            self.assertEqual(human.read("Player 1> ", timeout=5.0), "c")
            typist.join()

    def test_piped_input_without_timeouts_is_read_in_order(self):
        human = HumanInput(stream=io.StringIO("b 1 2\nc\n"))
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertEqual(human.read("> ", timeout=None), "b 1 2")
            self.assertEqual(human.read("> ", timeout=None), "c")
            with self.assertRaises(EOFError):
                human.read("> ", timeout=None)


if __name__ == '__main__':
    unittest.main()
