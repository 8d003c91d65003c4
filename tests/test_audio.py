import unittest

import numpy as np

from shape_puzzle.audio import FANFARE_NOTES, SAMPLE_RATE, NullCues, fanfare_wave, snap_wave


class TestAudioSynthesis(unittest.TestCase):
    def test_snap_is_short_and_quiet(self):
        wave = snap_wave()
        self.assertEqual(wave.dtype, np.int16)
        self.assertEqual(wave.shape, (int(SAMPLE_RATE * 0.05),))
        # Gain starts at 0.3 and decays towards 0.01
        self.assertLessEqual(int(np.abs(wave).max()), int(0.3 * 32767) + 1)
        head = np.abs(wave[:100].astype(np.int32)).max()
        tail = np.abs(wave[-100:].astype(np.int32)).max()
        self.assertGreater(head, tail)

    def test_fanfare_spans_all_notes(self):
        wave = fanfare_wave()
        self.assertEqual(wave.dtype, np.int16)
        self.assertEqual(len(FANFARE_NOTES), 4)
        self.assertEqual(wave.shape[0], int(SAMPLE_RATE * 1.05) + 1)
        # Every note window carries sound
        for offset in (0.0, 0.15, 0.3, 0.45):
            start = int(SAMPLE_RATE * (offset + 0.06))
            self.assertGreater(np.abs(wave[start:start + 200].astype(np.int32)).max(), 0)

    def test_given_other_sample_rate_then_lengths_scale(self):
        self.assertEqual(snap_wave(44100).shape[0], int(44100 * 0.05))

    def test_null_cues_are_silent_noops(self):
        cues = NullCues()
        self.assertIsNone(cues.on_piece_matched())
        self.assertIsNone(cues.on_round_won())


if __name__ == "__main__":
    unittest.main()
