import time
from natureid.orchestrator.contracts import EncodedImage, IdentificationRequest, IdentifyOutcome
from natureid.orchestrator import errors

class Orchestrator:
    def __init__(self, vision, status_store):
        self.vision = vision
        self.status = status_store

    def identify(self, image: EncodedImage) -> IdentifyOutcome:
        """
        idle -> loading -> success | error.
        Prior result/error are cleared before the call goes out. If reset() runs
        while the call is in flight, its outcome is dropped on return.
        """
        if self.status.loading:
            self.status.log("identify: rejected, busy")
            return IdentifyOutcome(ok=False, duration_ms=0, error_code=errors.ERR_BUSY)

        ticket = self.status.begin_loading(image)
        t0 = time.time()
        self.status.log(f"identify: start mime={image.mime_type} vision={type(self.vision).__name__}")
        try:
            result = self.vision.identify(IdentificationRequest(image=image))
        except Exception as e:
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"identify: error {type(e).__name__}: {e}")
            if not self.status.is_current(ticket):
                self.status.log("identify: failure after reset, dropped")
                return IdentifyOutcome(ok=False, duration_ms=dt, error_code=errors.ERR_DISCARDED)
            self.status.fail(errors.IDENTIFY_ERROR_MESSAGE)
            self.status.notify(errors.IDENTIFY_ERROR_TITLE, errors.IDENTIFY_ERROR_MESSAGE)
            return IdentifyOutcome(ok=False, duration_ms=dt, error_code=errors.ERR_IDENTIFY)

        dt = int((time.time() - t0) * 1000)
        if not self.status.is_current(ticket):
            self.status.log(f"identify: result after reset, dropped dt={dt}ms")
            return IdentifyOutcome(ok=False, duration_ms=dt, error_code=errors.ERR_DISCARDED)

        self.status.succeed(result)
        self.status.log(f"identify: done {result.species_name} conf={result.confidence:.1f} dt={dt}ms")
        return IdentifyOutcome(ok=True, duration_ms=dt, result=result)

    def reset(self):
        self.status.log(f"reset: from {self.status.phase}")
        self.status.reset()
