import unittest

from schema_validator import loader
from schema_validator.validator import Validator
from tests._util import player_data, player_schema, tmp_json, tmp_text


class LoaderTests(unittest.TestCase):
    def test_load_schema_from_file(self):
        data = player_schema()
        path = tmp_json(data)
        try:
            loaded = loader.load_schema(path)
            self.assertEqual(loaded, data)
        finally:
            path.unlink(missing_ok=True)

    def test_load_schema_accepts_str_path(self):
        path = tmp_json({"properties": {}})
        try:
            self.assertEqual(loader.load_schema(str(path)), {"properties": {}})
        finally:
            path.unlink(missing_ok=True)

    def test_load_schema_not_found(self):
        with self.assertRaises(FileNotFoundError):
            loader.load_schema("does_not_exist.json")

    def test_invalid_json_raises_value_error(self):
        p = tmp_text("{not json")
        try:
            with self.assertRaises(ValueError):
                loader.load_schema(p)
        finally:
            p.unlink(missing_ok=True)

    def test_empty_file_raises_value_error(self):
        p = tmp_text("")
        try:
            with self.assertRaises(ValueError):
                loader.load_schema(p)
        finally:
            p.unlink(missing_ok=True)

    def test_non_object_json_raises_value_error(self):
        p = tmp_json(["a", "b"])
        try:
            with self.assertRaisesRegex(ValueError, "must be a JSON object"):
                loader.load_schema(p)
        finally:
            p.unlink(missing_ok=True)

    def test_validator_load(self):
        path = tmp_json(player_schema())
        try:
            v = Validator.load(path)
            self.assertTrue(v.validate(player_data()).success)
        finally:
            path.unlink(missing_ok=True)


if __name__ == "__main__":
    unittest.main()
