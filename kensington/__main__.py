from kensington.cli import main

main()
