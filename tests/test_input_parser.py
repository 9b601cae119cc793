# tests/test_input_parser.py

import os
import tempfile
import unittest
import yaml
from parsers.input_parser import InputDeck, InputDeckModel
from pydantic import ValidationError
from utils.comm import SerialGroup
from utils.initializer import initialize_coupling, load_driver
from fakes import FakeTransport, pin_geometry_options


def valid_deck():
    return {
        "coupling": {
            "power": 1.0e4,
            "max_timesteps": 2,
            "max_picard_iter": 3,
        },
        "transport": {
            "driver": "fakes:FakeTransport",
            "options": pin_geometry_options(n_sectors=2),
        },
        "heat": {
            "driver": "fakes:FakeHeat",
            "options": pin_geometry_options(),
        },
    }


class TestInputParser(unittest.TestCase):

    def test_valid_input_deck(self):
        with tempfile.TemporaryDirectory() as tmp:
            input_deck_path = os.path.join(tmp, "input_deck.yaml")
            with open(input_deck_path, "w") as f:
                yaml.safe_dump(valid_deck(), f)
            input_deck = InputDeck.from_yaml(input_deck_path)
        self.assertEqual(input_deck.coupling.power, 1.0e4)
        self.assertEqual(input_deck.coupling.max_picard_iter, 3)
        self.assertEqual(input_deck.coupling.n_azimuthal, 4)
        self.assertAlmostEqual(input_deck.coupling.angle_offset, 0.01)
        self.assertEqual(input_deck.transport.options["n_sectors"], 2)

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            input_deck_path = os.path.join(tmp, "empty.yaml")
            open(input_deck_path, "w").close()
            with self.assertRaises(ValueError):
                InputDeck.from_yaml(input_deck_path)

    def test_missing_required_field(self):
        mock_data = valid_deck()
        del mock_data["coupling"]["max_timesteps"]
        with self.assertRaises(ValidationError):
            InputDeckModel(**mock_data)

    def test_invalid_type(self):
        mock_data = valid_deck()
        mock_data["coupling"]["power"] = "ten kilowatts"
        with self.assertRaises(ValidationError):
            InputDeck.from_dict(mock_data)

    def test_non_positive_values(self):
        for key in ("power", "max_timesteps", "max_picard_iter"):
            with self.subTest(key=key):
                mock_data = valid_deck()
                mock_data["coupling"][key] = 0
                with self.assertRaises(ValidationError):
                    InputDeckModel(**mock_data)

    def test_malformed_driver_path(self):
        mock_data = valid_deck()
        mock_data["heat"]["driver"] = "fakes.FakeHeat"
        with self.assertRaises(ValidationError):
            InputDeckModel(**mock_data)


class TestInitializer(unittest.TestCase):

    def test_load_driver(self):
        self.assertIs(load_driver("fakes:FakeTransport"), FakeTransport)
        with self.assertRaises(ValueError):
            load_driver("fakes:NoSuchDriver")
        with self.assertRaises(ValueError):
            load_driver("no_such_module_here:Driver")

    def test_initialize_coupling(self):
        input_deck = InputDeck.from_dict(valid_deck())
        coupler = initialize_coupling(input_deck, SerialGroup())
        self.assertEqual(coupler.max_timesteps, 2)
        self.assertEqual(coupler.max_picard_iter, 3)
        # two sectors per ring
        self.assertEqual(coupler.mapping.n_regions, 2 * coupler.geometry.n_total_rings)
        history = coupler.solve()
        self.assertEqual(len(history), 6)


if __name__ == '__main__':
    unittest.main()
