"""Static permission matrix data shipped with gigvora-access."""
