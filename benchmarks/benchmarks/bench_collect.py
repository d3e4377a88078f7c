from pymona.Char import digit, string
from pymona.Combinators import collect, split
from pymona.Parse import run_parser
from pymona.ParseAsync import parse_async


class TimeCollect:
    def setup(self):
        self.parser = collect(string("a"))
        self.small = "a" * 1000
        self.medium = "a" * 10000
        self.large = "a" * 100000

    def time_collect_small(self):
        run_parser(self.parser, self.small)

    def time_collect_medium(self):
        run_parser(self.parser, self.medium)

    def time_collect_large(self):
        run_parser(self.parser, self.large)


class TimeSplit:
    def setup(self):
        self.parser = split(digit(), string(","))
        self.data = ",".join("1" * 10000)

    def time_split(self):
        run_parser(self.parser, self.data)


class TimeAsyncChunks:
    params = [16, 256, 4096]
    param_names = ["chunk_size"]

    def setup(self, chunk_size):
        self.data = "foo" * 5000
        self.chunks = [self.data[i:i + chunk_size]
                       for i in range(0, len(self.data), chunk_size)]

    def time_parse_async(self, chunk_size):
        results = []
        handle = parse_async(string("foo"), lambda err, v: results.append(v))
        for chunk in self.chunks:
            handle.data(chunk)
        handle.done()
