class TestKeyValueRepo:

    def test_missing_key(self, kv_repo):
        assert kv_repo.load("nothing") is None

    def test_save_overwrites_whole_value(self, kv_repo):
        kv_repo.save("k", [1, 2, 3])
        kv_repo.save("k", [4])

        assert kv_repo.load("k") == [4]

    def test_save_many(self, kv_repo):
        kv_repo.save_many({"a": [], "b": [{"x": "1"}]})

        assert kv_repo.load("a") == []
        assert kv_repo.load("b") == [{"x": "1"}]

    def test_ping(self, kv_repo):
        assert kv_repo.ping()
