# Mock factories for repository interfaces
