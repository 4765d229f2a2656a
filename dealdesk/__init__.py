"""DealDesk - contacts, companies and a deal pipeline."""
