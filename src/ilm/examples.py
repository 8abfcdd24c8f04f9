"""
Example AST builder for demos and tests.

Builds the quoted form of a small Elixir module:

    1  defmodule MyApp.Worker do
    2    require Logger
    3
    4    def run(job) do
    5      Logger.info("starting", job_id: job.id)
    6      Logger.error("We have a problem", error_code: :pc_load_letter)
    7      Logger.metadata(request_id: "abc")
    8      Logger.log(:warning, "slow", file: "lib/worker.ex")
    9      Logger.debug("done", meta)
   10    end
   11  end

With metadata keys [:error_code, :file], lines 5, 7 and 9 are reported.
"""
from ilm.ast_nodes import (
    Atom,
    Literal,
    Variable,
    Aliases,
    ListNode,
    LocalCall,
    RemoteCall,
    Meta,
    keyword,
)


def logger_call(function: str, *args, line: int) -> RemoteCall:
    return RemoteCall(
        target=Aliases(("Logger",), meta=Meta(line=line)),
        function=function,
        args=tuple(args),
        meta=Meta(line=line),
    )


def do_block(*body) -> ListNode:
    """`do ... end` as the keyword list `[do: body]`."""
    if len(body) == 1:
        block = body[0]
    else:
        block = LocalCall("__block__", tuple(body))
    return keyword(do=block)


def build_example_worker_module() -> LocalCall:
    job_id = RemoteCall(
        target=Variable("job", meta=Meta(line=5)),
        function="id",
        args=(),
        meta=Meta(line=5),
    )

    body = do_block(
        logger_call("info", Literal("starting"), keyword(job_id=job_id), line=5),
        logger_call("error", Literal("We have a problem"), keyword(error_code=Atom("pc_load_letter")), line=6),
        logger_call("metadata", keyword(request_id="abc"), line=7),
        logger_call("log", Atom("warning"), Literal("slow"), keyword(file="lib/worker.ex"), line=8),
        logger_call("debug", Literal("done"), Variable("meta", meta=Meta(line=9)), line=9),
    )

    run = LocalCall(
        "def",
        (
            LocalCall("run", (Variable("job", meta=Meta(line=4)),), meta=Meta(line=4)),
            body,
        ),
        meta=Meta(line=4),
    )

    return LocalCall(
        "defmodule",
        (
            Aliases(("MyApp", "Worker"), meta=Meta(line=1)),
            do_block(
                LocalCall("require", (Aliases(("Logger",), meta=Meta(line=2)),), meta=Meta(line=2)),
                run,
            ),
        ),
        meta=Meta(line=1),
    )


EXAMPLE_LOGGER_CONFIG = {
    "logger": {
        "console": {
            "format": "[$level] $message $metadata\n",
            "metadata": ["error_code", "file"],
        }
    }
}
