"""Services Layer — models and registry orchestrating core logic around store IO."""
