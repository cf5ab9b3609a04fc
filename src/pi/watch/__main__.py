from pi.watch.cli import main

main()
