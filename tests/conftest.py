import textwrap


class FakeRepo:
    """
    In-memory posts repo. Listing order is insertion order, like a directory
    listing that is not sorted.
    Set fail_write / fail_delete to an exception to simulate disk errors.
    """

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})
        self.fail_write = None
        self.fail_delete = None
        self.calls = []

    def list_filenames(self):
        self.calls.append("list")
        return list(self.files)

    def read(self, filename: str) -> str:
        self.calls.append(f"read:{filename}")
        if filename not in self.files:
            raise FileNotFoundError(filename)
        return self.files[filename]

    def write(self, filename: str, text: str) -> None:
        self.calls.append(f"write:{filename}")
        if self.fail_write:
            raise self.fail_write
        self.files[filename] = text

    def delete(self, filename: str) -> None:
        self.calls.append(f"delete:{filename}")
        if self.fail_delete:
            raise self.fail_delete
        if filename not in self.files:
            raise FileNotFoundError(filename)
        del self.files[filename]

    @property
    def writes(self):
        return [c for c in self.calls if c.startswith(("write:", "delete:"))]


class FakeSiteBuilder:
    def __init__(self, result: bool = True):
        self.result = result
        self.calls = 0

    def regenerate(self) -> bool:
        self.calls += 1
        return self.result


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    Pass an exception as a *_return value to have the call raise it.
    """

    def __init__(
        self,
        list_posts_return=None,
        get_post_return=None,
        write_return=None,
        delete_return=None,
    ):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._write_return = write_return
        self._delete_return = delete_return
        self.calls = []

    def list_posts(self):
        return self._answer(self._list_posts_return)

    def get_post(self, slug: str):
        self.calls.append(("get", slug))
        return self._answer(self._get_post_return)

    def create_post(self, payload):
        self.calls.append(("create", payload))
        return self._answer(self._write_return)

    def update_post(self, slug, payload):
        self.calls.append(("update", slug, payload))
        return self._answer(self._write_return)

    def delete_post(self, slug):
        self.calls.append(("delete", slug))
        return self._answer(self._delete_return)

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return value


def post_text(raw: str) -> str:
    """Dedent an inline post fixture."""
    return textwrap.dedent(raw).lstrip()
