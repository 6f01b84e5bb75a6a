from spoonerizer.cli import main

main()
