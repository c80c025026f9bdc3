class VisionAdapter:
    def is_configured(self) -> bool:
        """True when the provider has the credential it needs."""
        return True

    def complete(self, query) -> str:
        """Send ModelQuery (instruction + image data URL), return the model's raw text reply."""
        raise NotImplementedError
