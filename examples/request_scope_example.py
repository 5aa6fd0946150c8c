import threading

import reactivex as rx

from scopelog import Logger, Scope, StackError, error_field, field, get_default_logger
from scopelog.opt import log_each

# this example passes a request scope down a call chain; every record carries the
# fields attached on the way, with the innermost value winning.


def handle(log: Logger, scope: Scope, request_id: str):
    scope = log.with_fields(scope, {"request_id": request_id, "stage": "accept"})
    log.info(scope, "request accepted")

    scope = log.with_field(scope, "stage", "process")
    try:
        raise StackError("broken pipe")
    except StackError as e:
        log.error(scope, "write failed", error_field(e))

    log.debug(log.set_debug(scope, True), "debug for this request only")

    rx.from_([1, 2, 3]).pipe(log_each(log, scope, "chunk", key="seq")).subscribe()

    # unencodable values degrade to a substitute record
    log.print(scope, "bad payload", field("payload", object()))


def main():
    log = get_default_logger(fields={"svc": "example"})
    root = Scope()

    threads = [threading.Thread(target=handle, args=(log, root, f"r-{i}")) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


if __name__ == "__main__":
    main()
