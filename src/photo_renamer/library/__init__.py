"""Tag vocabulary, photo registry and derived names."""
